"""
FastAPI application for the remittance rail
"""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from remittance.api.endpoints.transfers import error_handler, transfers_api
from remittance.utils.config_loader import load_remittance_config

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Remittance Rail API",
    description="Runs token -> quote -> transaction -> confirm transfers against the DRAP rail",
    version="1.0.0",
)

app.include_router(transfers_api, prefix="/api/v1/remittance", tags=["Remittance"])


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    payload = error_handler.handle_exception(exc, context={"path": request.url.path})
    return JSONResponse(status_code=500, content=payload)


@app.get("/health")
async def health():
    config = load_remittance_config()
    return {"status": "ok", "integrations_mode": config.integrations_mode}
