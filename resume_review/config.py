"""
Configuration Management

Centralized configuration management using environment variables
with proper validation and type safety.
"""

import os
from typing import List, Optional
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv


# Load environment variables from .env in project root (resolve to absolute path)
_project_root = Path(__file__).resolve().parent.parent
_env_path = _project_root / ".env"
if _env_path.exists():
    load_dotenv(dotenv_path=str(_env_path))
else:
    # Fallback to .env.local (the frontend's env file)
    _env_path_fallback = _project_root / ".env.local"
    if _env_path_fallback.exists():
        _env_path = _env_path_fallback
        load_dotenv(dotenv_path=str(_env_path_fallback))
    # Also load from current working directory so "python backend_server.py" picks up .env
    load_dotenv()

ENV_FILE_PATH = _env_path

DEFAULT_FALLBACK_MODEL = "gemini-1.5-flash"
DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10MB


def _clean(value: Optional[str]) -> Optional[str]:
    """Strip whitespace and surrounding quotes; empty strings become None."""
    if value is None:
        return None
    value = value.strip().strip("\"'").strip()
    return value or None


@dataclass
class GeminiConfig:
    """Google Gemini LLM configuration"""
    api_key: Optional[str] = None
    # Explicit model override; bypasses model resolution when set
    model_override: Optional[str] = None
    fallback_model: str = DEFAULT_FALLBACK_MODEL
    base_url: str = DEFAULT_GEMINI_BASE_URL
    timeout_seconds: float = 20.0
    temperature: float = 0.0
    max_output_tokens: int = 2048


@dataclass
class UploadConfig:
    """Resume upload limits"""
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES


@dataclass
class ServerConfig:
    """HTTP server configuration"""
    host: str = "0.0.0.0"
    port: int = 8000
    frontend_url: str = ""
    cors_origins: List[str] = field(default_factory=list)


@dataclass
class Config:
    """Main application configuration"""

    # AI Services - Google Gemini
    gemini: GeminiConfig

    # Upload handling
    upload: UploadConfig

    # Server configuration
    server: ServerConfig

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    @property
    def env_file_exists(self) -> bool:
        return ENV_FILE_PATH.exists()

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create configuration from environment variables.

        GEMINI_API_KEY is not validated here: a missing key is reported
        per request so the server can still start and answer health checks.

        Returns:
            Configured Config instance

        Raises:
            ValueError: If a numeric environment variable cannot be parsed
        """
        extra_origins = os.getenv("CORS_ORIGINS", "")
        cors_origins = [o.strip().rstrip("/") for o in extra_origins.split(",") if o.strip()]

        return cls(
            gemini=GeminiConfig(
                api_key=_clean(os.getenv("GEMINI_API_KEY")),
                model_override=_clean(os.getenv("GEMINI_MODEL")),
                fallback_model=_clean(os.getenv("GEMINI_FALLBACK_MODEL")) or DEFAULT_FALLBACK_MODEL,
                base_url=(os.getenv("GEMINI_API_BASE_URL") or DEFAULT_GEMINI_BASE_URL).rstrip("/"),
                timeout_seconds=float(os.getenv("GEMINI_TIMEOUT_SECONDS", "20")),
                temperature=float(os.getenv("GEMINI_TEMPERATURE", "0.0")),
                max_output_tokens=int(os.getenv("GEMINI_MAX_OUTPUT_TOKENS", "2048")),
            ),
            upload=UploadConfig(
                max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES))),
            ),
            server=ServerConfig(
                host=os.getenv("SERVER_HOST", "0.0.0.0"),
                port=int(os.getenv("SERVER_PORT", "8000")),
                frontend_url=os.getenv("FRONTEND_URL", ""),
                cors_origins=cors_origins,
            ),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        )


def get_config() -> Config:
    """
    Get configuration from environment variables.

    Returns:
        Configuration instance
    """
    return Config.from_env()
