"""
Resume analysis Pydantic schemas.

Field names follow the JSON keys the frontend already sends and reads.
"""

from typing import Optional

from pydantic import BaseModel, Field


class AnalyzeResponse(BaseModel):
    text: str
    analysis: str


class GenerateImprovedRequest(BaseModel):
    # Optional so missing fields reach the service and get a 400, not a 422
    originalResume: Optional[str] = Field(None, example="Jane Doe\nSoftware Engineer ...")
    suggestions: Optional[str] = Field(None, example="- Weaknesses: ...")


class GenerateImprovedResponse(BaseModel):
    improvedResume: str


class ConfigStatusResponse(BaseModel):
    hasKey: bool
    keyLength: int
    envFileExists: bool
    modelOverride: Optional[str] = None
    cachedModel: Optional[str] = None
    cachedModelAgeSeconds: Optional[float] = None


__all__ = [
    "AnalyzeResponse",
    "GenerateImprovedRequest",
    "GenerateImprovedResponse",
    "ConfigStatusResponse",
]
