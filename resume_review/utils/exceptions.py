"""
Application exceptions.

Every error the pipeline reports to a client derives from
`ResumeReviewError`, which carries the HTTP status the routers use.
"""

from typing import Optional

from fastapi import status


class ResumeReviewError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Failed to process the request. Please try again later."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(ResumeReviewError):
    """Missing or empty GEMINI_API_KEY."""

    default_message = "Server configuration incomplete. Contact the administrator."


class MissingInput(ResumeReviewError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Missing required input."


class FileTooLarge(ResumeReviewError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "File exceeds the maximum upload size."


class UnsupportedFormat(ResumeReviewError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, received: str):
        self.received = received
        super().__init__(
            f"Unsupported format. Use PDF or DOCX files. Received type: {received or 'unknown'}"
        )


class CorruptFile(ResumeReviewError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, file_format: str):
        self.file_format = file_format
        super().__init__(
            f"Could not read the {file_format} file. Check whether the file is corrupted."
        )


class EmptyExtraction(ResumeReviewError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Could not extract any text from the file. Check whether the file contains text."


class ProviderError(ResumeReviewError):
    """Remote model call failed."""

    default_message = "Failed to analyze the resume. Please try again later."


class AuthError(ProviderError):
    """Provider rejected the API key."""

    default_message = "Authentication error with the AI provider. Check the server configuration."


LEAKED_KEY_MESSAGE = (
    "Your API key was reported as leaked. Generate a new key in Google AI Studio "
    "and update GEMINI_API_KEY in the server environment."
)

# Phrases the provider uses when it rejects a key
_LEAKED_KEY_PHRASES = ("leaked",)
_AUTH_PHRASES = (
    "api key",
    "api_key_invalid",
    "permission_denied",
    "unauthenticated",
    "gemini_api_key",
    "401",
    "403",
)


def redact(text: str, secret: Optional[str]) -> str:
    if secret:
        text = text.replace(secret, "***")
    return text


def classify_provider_failure(exc: Exception, api_key: Optional[str] = None) -> ResumeReviewError:
    """
    Map a failure raised while talking to the provider onto the error taxonomy.

    Already-classified errors pass through. Key-related messages become
    `AuthError`; anything else becomes a `ProviderError` carrying the
    original message with the API key redacted.
    """
    if isinstance(exc, ResumeReviewError) and type(exc) is not ProviderError:
        return exc

    raw = redact(str(exc).strip(), api_key)
    lowered = raw.lower()

    if any(phrase in lowered for phrase in _LEAKED_KEY_PHRASES):
        return AuthError(LEAKED_KEY_MESSAGE)
    if any(phrase in lowered for phrase in _AUTH_PHRASES):
        return AuthError()
    return ProviderError(raw[:500] or None)
