from fastapi import APIRouter

from resume_review.schemas.analysis import ConfigStatusResponse
from resume_review.services import container
from resume_review.utils.logger import get_logger

logger = get_logger(__name__)

# Liveness and configuration diagnostics
router = APIRouter(tags=["Operations"])


@router.get("/health")
async def health():
    """Liveness check: returns 200 if the process is running."""
    return {"status": "ok"}


@router.get("/config-status", response_model=ConfigStatusResponse)
async def config_status():
    """
    Report whether the Gemini key is loaded. Only the key length is exposed,
    never the key itself.
    """
    services = container.services
    api_key = services.config.gemini.api_key or ""
    return ConfigStatusResponse(
        hasKey=bool(api_key),
        keyLength=len(api_key),
        envFileExists=services.config.env_file_exists,
        modelOverride=services.config.gemini.model_override,
        cachedModel=services.model_cache.get(),
        cachedModelAgeSeconds=services.model_cache.age(),
    )


@router.post("/model-cache/invalidate")
async def invalidate_model_cache():
    """Drop the cached model so the next request queries the model list again."""
    services = container.services
    previous = services.model_cache.get()
    services.model_cache.invalidate()
    logger.info(f"[API] Model cache invalidated (previous: {previous})")
    return {"success": True, "previousModel": previous}
