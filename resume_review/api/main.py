"""
FastAPI Application

HTTP API server for resume analysis and improved-resume generation.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from resume_review import __version__
from resume_review.api import analyze as analyze_api
from resume_review.api import operations as operations_api
from resume_review.services import container
from resume_review.services.container import config
from resume_review.utils.logger import get_logger, setup_logging

setup_logging(config)
logger = get_logger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Resume Review API",
    description="API for resume upload, AI critique and improved-resume generation",
    version=__version__,
)

# CORS middleware: with allow_credentials=True, origins cannot be "*" (must be explicit).
_cors_origins = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]
if config.server.frontend_url:
    _cors_origins.append(config.server.frontend_url.rstrip("/"))
# Extra origins from env (comma-separated), e.g. CORS_ORIGINS=http://192.168.1.5:3000
for o in config.server.cors_origins:
    if o not in _cors_origins:
        _cors_origins.append(o)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes are served both at the root and under /api (the frontend's paths)
app.include_router(analyze_api.router)
app.include_router(analyze_api.router, prefix="/api")
app.include_router(operations_api.router)


@app.on_event("startup")
async def startup_log_config():
    """Log which Gemini settings are in effect (never the key itself)."""
    gemini = config.gemini
    if gemini.api_key:
        logger.info(f"[API] ✅ GEMINI_API_KEY loaded (length: {len(gemini.api_key)})")
    else:
        logger.error("[API] ❌ GEMINI_API_KEY is not set; analysis requests will fail")
    if gemini.model_override:
        logger.info(f"[API] Model override in effect: {gemini.model_override}")


@app.on_event("shutdown")
async def shutdown_close_clients():
    """Release the Gemini SDK clients held by the gateway."""
    await container.services.gemini_gateway.aclose()
