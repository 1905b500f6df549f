"""
PROFILE_LAYOUT — FastAPI app
Démarrer : uvicorn profile_layout.api.main:app --reload --port 8001
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config import log_level
from .routes.layouts import router as layouts_router

logging.basicConfig(level=log_level(), format="%(asctime)s %(levelname)s — %(message)s")
log = logging.getLogger(__name__)

app = FastAPI(title="PROFILE_LAYOUT — Composition de profils", version="1.0.0", docs_url="/docs")

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

app.include_router(layouts_router)


@app.get("/health")
def health():
    return {"status": "ok", "service": "profile_layout", "version": "1.0.0"}
