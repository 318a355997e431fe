from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from finhealth import config
from finhealth.mcp import router as mcp_router
from finhealth.routes import actions, history, insights, profile

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

if config.DEV_BYPASS_AUTH:
    logger.warning("DEV_BYPASS_AUTH is enabled; every request runs as demo-user")
elif not config.SUPABASE_JWT_SECRET:
    logger.warning("SUPABASE_JWT_SECRET is not set; authenticated routes will reject all tokens")

app = FastAPI(title="FinHealth Scoring API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(profile.router)  # Household profile read/replace/patch
app.include_router(insights.router)  # Score, SWOT and FIRE projection
app.include_router(history.router)  # Score checkpoints and trend
app.include_router(actions.router)  # Accepted action items
app.include_router(mcp_router)  # JSON-RPC tool surface


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "storage": config.STORAGE_BACKEND}
