"""
Data models for pdf2jpg.
"""

from pathlib import Path
from pydantic import BaseModel, Field


class ConversionResult(BaseModel):
    """Outcome of converting one stored PDF."""

    source: Path = Field(..., description="Stored input PDF")
    artifact_name: str = Field(..., description="File name of the produced image")
    artifact_url: str = Field(..., description="Locator a client can fetch the image from")
    elapsed: float = Field(ge=0.0, default=0.0, description="Seconds spent converting")
