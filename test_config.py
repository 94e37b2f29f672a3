from resume_review.config import Config


def test_from_env_reads_gemini_settings(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", ' "abc123" ')
    monkeypatch.setenv("GEMINI_MODEL", "gemini-2.0-flash")
    monkeypatch.setenv("GEMINI_TIMEOUT_SECONDS", "15")
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "2048")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test/, ,http://b.test")

    config = Config.from_env()

    assert config.gemini.api_key == "abc123"
    assert config.gemini.model_override == "gemini-2.0-flash"
    assert config.gemini.timeout_seconds == 15.0
    assert config.upload.max_upload_bytes == 2048
    assert config.server.cors_origins == ["http://a.test", "http://b.test"]


def test_from_env_defaults(monkeypatch):
    for name in ("GEMINI_API_KEY", "GEMINI_MODEL", "GEMINI_FALLBACK_MODEL",
                 "GEMINI_TIMEOUT_SECONDS", "MAX_UPLOAD_BYTES", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GEMINI_MODEL", "   ")

    config = Config.from_env()

    assert config.gemini.api_key is None
    assert config.gemini.model_override is None
    assert config.gemini.fallback_model == "gemini-1.5-flash"
    assert config.gemini.timeout_seconds == 20.0
    assert config.upload.max_upload_bytes == 10 * 1024 * 1024
