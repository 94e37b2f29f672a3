from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from conftest import FakeModels, FakeSdkClient, make_docx, make_pdf
from resume_review.api.main import app
from resume_review.services import container
from resume_review.services.container import ServiceContainer
from resume_review.services.document_extractor import DOCX_MIME_TYPE
from resume_review.services.llm_gateway import GeminiGateway
from resume_review.services.prompt_service import ANALYSIS_SECTIONS

ANALYSIS_REPLY = "\n\n".join(f"## {section}\n- ..." for section in ANALYSIS_SECTIONS)


@pytest.fixture
def models():
    return FakeModels(reply=SimpleNamespace(text=ANALYSIS_REPLY))


@pytest.fixture
def services(config, models, monkeypatch):
    config.gemini.model_override = "gemini-2.0-flash"
    gateway = GeminiGateway(config, sdk_client_factory=lambda key: FakeSdkClient(models))
    services = ServiceContainer(config, gateway=gateway)
    monkeypatch.setattr(container, "services", services)
    return services


@pytest.fixture
def client(services):
    return TestClient(app)


def test_analyze_two_page_pdf(client, models, resume_lines):
    response = client.post(
        "/analyze",
        files={"file": ("resume.pdf", make_pdf(resume_lines), "application/pdf")},
    )

    assert response.status_code == 200
    data = response.json()
    assert "Jane Doe" in data["text"]
    assert "Acme Corp" in data["text"]
    for section in ANALYSIS_SECTIONS:
        assert section in data["analysis"]
    assert models.calls[0]["model"] == "gemini-2.0-flash"


def test_analyze_docx_under_api_prefix(client):
    response = client.post(
        "/api/analyze",
        files={"file": ("resume.docx", make_docx(["Jane Doe", "Go developer"]), DOCX_MIME_TYPE)},
    )

    assert response.status_code == 200
    assert response.json()["text"] == "Jane Doe\nGo developer"


def test_analyze_without_file(client):
    response = client.post("/analyze")

    assert response.status_code == 400
    assert response.json()["detail"] == "No file uploaded."


def test_analyze_unsupported_format(client, models):
    response = client.post(
        "/analyze",
        files={"file": ("resume.txt", b"Jane Doe", "text/plain")},
    )

    assert response.status_code == 400
    assert "PDF or DOCX" in response.json()["detail"]
    assert models.calls == []


def test_analyze_corrupt_docx(client, models):
    response = client.post(
        "/analyze",
        files={"file": ("resume.docx", b"plain text with a .docx name", "application/octet-stream")},
    )

    assert response.status_code == 400
    assert "DOCX" in response.json()["detail"]
    assert models.calls == []


def test_analyze_empty_pdf(client):
    response = client.post(
        "/analyze",
        files={"file": ("resume.pdf", make_pdf([["  "]]), "application/pdf")},
    )

    assert response.status_code == 400
    assert "extract" in response.json()["detail"]


def test_analyze_rejects_11_mib_pdf_before_extraction(client, services, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("extraction must not run")

    monkeypatch.setattr(services.document_extractor, "extract", fail)
    big = b"%PDF-1.4\n" + b"0" * (11 * 1024 * 1024)

    response = client.post("/analyze", files={"file": ("big.pdf", big, "application/pdf")})

    assert response.status_code == 400
    assert "maximum" in response.json()["detail"]


def test_analyze_missing_api_key(client, services):
    services.config.gemini.api_key = None

    response = client.post(
        "/analyze",
        files={"file": ("resume.pdf", make_pdf([["Jane"]]), "application/pdf")},
    )

    assert response.status_code == 500
    assert "configuration" in response.json()["detail"].lower()


def test_analyze_provider_auth_failure(client, models, resume_lines):
    models.error = RuntimeError("400 API key not valid. Please pass a valid API key.")

    response = client.post(
        "/analyze",
        files={"file": ("resume.pdf", make_pdf(resume_lines), "application/pdf")},
    )

    assert response.status_code == 500
    assert "Authentication" in response.json()["detail"]


def test_generate_improved(client, models):
    models.reply = SimpleNamespace(text="Improved resume")

    response = client.post(
        "/generate-improved",
        json={"originalResume": "Jane Doe", "suggestions": "Add metrics"},
    )

    assert response.status_code == 200
    assert response.json() == {"improvedResume": "Improved resume"}


@pytest.mark.parametrize("body", [
    {"originalResume": "", "suggestions": "Add metrics"},
    {"originalResume": "Jane Doe"},
    {},
])
def test_generate_improved_missing_fields(client, models, body):
    response = client.post("/generate-improved", json=body)

    assert response.status_code == 400
    assert models.calls == []


def test_generate_improved_leaked_key(client, models):
    models.error = RuntimeError("Your API key was reported as leaked.")

    response = client.post(
        "/api/generate-improved",
        json={"originalResume": "Jane Doe", "suggestions": "Add metrics"},
    )

    assert response.status_code == 500
    assert "leaked" in response.json()["detail"]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_config_status_never_exposes_key(client, services, monkeypatch):
    now = [50.0]
    monkeypatch.setattr(services.model_cache, "_clock", lambda: now[0])
    services.model_cache.set("gemini-2.0-flash")
    now[0] = 95.5

    response = client.get("/config-status")

    data = response.json()
    assert data["hasKey"] is True
    assert data["keyLength"] == len("test-key")
    assert data["cachedModel"] == "gemini-2.0-flash"
    assert data["cachedModelAgeSeconds"] == 45.5
    assert "test-key" not in response.text


def test_model_cache_invalidate(client, services):
    services.model_cache.set("gemini-1.5-pro")

    response = client.post("/model-cache/invalidate")

    assert response.json() == {"success": True, "previousModel": "gemini-1.5-pro"}
    assert services.model_cache.get() is None


def test_config_status_without_cached_model(client, services):
    data = client.get("/config-status").json()

    assert data["cachedModel"] is None
    assert data["cachedModelAgeSeconds"] is None
