import os
from io import BytesIO
from types import SimpleNamespace
from typing import List

import pytest

# Set before the application modules read the environment
os.environ.setdefault("GEMINI_API_KEY", "test-key")

from docx import Document
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from resume_review.config import Config, GeminiConfig, ServerConfig, UploadConfig


def make_pdf(pages: List[List[str]]) -> bytes:
    """Render one Helvetica text line per entry, one page per list."""
    buf = BytesIO()
    pdf = canvas.Canvas(buf, pagesize=letter)
    for lines in pages:
        pdf.setFont("Helvetica", 12)
        y = 720
        for line in lines:
            pdf.drawString(72, y, line)
            y -= 14
        pdf.showPage()
    pdf.save()
    return buf.getvalue()


def make_docx(paragraphs: List[str]) -> bytes:
    doc = Document()
    for paragraph in paragraphs:
        doc.add_paragraph(paragraph)
    buf = BytesIO()
    doc.save(buf)
    return buf.getvalue()


class FakeModels:
    """Stands in for `client.aio.models` of the google-genai SDK."""

    def __init__(self, reply=None, error=None):
        self.reply = reply if reply is not None else SimpleNamespace(text="Generated text")
        self.error = error
        self.calls = []

    async def generate_content(self, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return self.reply


class FakeSdkClient:
    def __init__(self, models: FakeModels):
        self.aio = SimpleNamespace(models=models)


@pytest.fixture
def config():
    return Config(
        gemini=GeminiConfig(api_key="test-key"),
        upload=UploadConfig(),
        server=ServerConfig(),
    )


@pytest.fixture
def fake_models():
    return FakeModels()


@pytest.fixture
def sdk_factory(fake_models):
    return lambda api_key: FakeSdkClient(fake_models)


@pytest.fixture
def resume_lines():
    return [
        ["Jane Doe", "Senior Software Engineer", "Python, FastAPI, Kubernetes"],
        ["Experience", "Acme Corp 2019-2024: built payment APIs"],
    ]
