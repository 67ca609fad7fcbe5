from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dexinfo.api.routers.positions import router as positions_router
from dexinfo.api.routers.token_metrics import router as token_metrics_router
from dexinfo.api.routers.transactions import router as transactions_router
from dexinfo.shared.config import get_settings

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(title="DEX Info API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(token_metrics_router)
app.include_router(positions_router)
app.include_router(transactions_router)


@app.get("/health")
def health():
    return {"status": "ok"}
