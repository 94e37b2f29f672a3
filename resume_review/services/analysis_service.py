"""
Analysis Service

Orchestrates the two request flows:

- analyze: upload -> text extraction -> model resolution -> analysis prompt -> Gemini
- rewrite: resume + prior analysis -> model resolution -> rewrite prompt -> Gemini

Provider failures are mapped onto the application's error taxonomy here.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

from resume_review.config import Config
from resume_review.services.document_extractor import DocumentExtractor, UploadedDocument
from resume_review.services.llm_gateway import GeminiGateway
from resume_review.services.model_resolver import ModelResolver
from resume_review.services.prompt_service import build_analysis_prompt, build_rewrite_prompt
from resume_review.utils.logger import get_logger
from resume_review.utils.exceptions import (
    ConfigurationError,
    MissingInput,
    classify_provider_failure,
)

logger = get_logger(__name__)


@dataclass
class AnalysisOutcome:
    text: str
    analysis: str


@dataclass
class ImprovedResumeOutcome:
    improved_resume: str


class AnalysisService:
    """Pipeline wiring extraction, model resolution, prompts and the gateway."""

    def __init__(
        self,
        config: Config,
        extractor: DocumentExtractor,
        resolver: ModelResolver,
        gateway: GeminiGateway,
    ):
        self.config = config
        self.extractor = extractor
        self.resolver = resolver
        self.gateway = gateway

    def _require_api_key(self) -> str:
        api_key = self.config.gemini.api_key
        if not api_key:
            logger.error("[AnalysisService] ❌ GEMINI_API_KEY could not be loaded")
            raise ConfigurationError()
        return api_key

    async def _generate(self, prompt: str, api_key: str) -> str:
        resolved = await self.resolver.resolve(api_key)
        logger.info(f"[AnalysisService] Using model {resolved.identifier} ({resolved.source})")
        try:
            return await self.gateway.generate(prompt, resolved.identifier, api_key)
        except Exception as e:
            error = classify_provider_failure(e, api_key)
            logger.error(f"[AnalysisService] ❌ Generation failed: {error.message}", exc_info=True)
            raise error from e

    async def analyze(self, upload: Optional[UploadedDocument]) -> AnalysisOutcome:
        """
        Analyze an uploaded resume.

        Raises:
            ConfigurationError, MissingInput, FileTooLarge, UnsupportedFormat,
            CorruptFile, EmptyExtraction, AuthError, ProviderError
        """
        api_key = self._require_api_key()

        if upload is None or not upload.filename:
            raise MissingInput("No file uploaded.")

        # PDF/DOCX parsing is CPU-bound; keep it off the event loop
        extracted = await asyncio.to_thread(self.extractor.extract_upload, upload)

        prompt = build_analysis_prompt(extracted.content)
        analysis = await self._generate(prompt, api_key)
        return AnalysisOutcome(text=extracted.content, analysis=analysis)

    async def generate_improved(
        self,
        original_resume: Optional[str],
        suggestions: Optional[str],
    ) -> ImprovedResumeOutcome:
        """
        Rewrite a resume applying a prior analysis.

        Inputs are validated before any provider call is made.
        """
        if not (original_resume or "").strip() or not (suggestions or "").strip():
            raise MissingInput("Insufficient data. Send the original resume and the suggestions.")

        api_key = self._require_api_key()

        prompt = build_rewrite_prompt(original_resume, suggestions)
        improved = await self._generate(prompt, api_key)
        return ImprovedResumeOutcome(improved_resume=improved)
