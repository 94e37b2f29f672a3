from resume_review.config import Config, get_config
from resume_review.services.document_extractor import DocumentExtractor
from resume_review.services.model_resolver import ModelCache, ModelResolver
from resume_review.services.llm_gateway import GeminiGateway
from resume_review.services.analysis_service import AnalysisService


class ServiceContainer:
    """Long-lived services shared by every request."""

    def __init__(self, config: Config, resolver=None, gateway=None):
        self.config = config
        self.model_resolver = resolver or ModelResolver(config, cache=ModelCache())
        self.model_cache = self.model_resolver.cache
        self.document_extractor = DocumentExtractor(config)
        self.gemini_gateway = gateway or GeminiGateway(config)
        self.analysis_service = AnalysisService(
            config,
            extractor=self.document_extractor,
            resolver=self.model_resolver,
            gateway=self.gemini_gateway,
        )


config = get_config()

# Initialize services
services = ServiceContainer(config)
