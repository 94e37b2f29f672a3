"""Resume review API: PDF/DOCX resume critique and rewrite through Google Gemini."""

__version__ = "1.0.0"
