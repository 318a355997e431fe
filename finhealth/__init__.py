"""FinHealth scoring, FIRE projection and SWOT service."""
