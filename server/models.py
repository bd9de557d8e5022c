"""
Pydantic models for API requests/responses.
"""

from datetime import datetime, timezone
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field


class SignupRequest(BaseModel):
    """Account creation payload. Missing fields are reported as 400 by the handler."""
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    """Session creation payload."""
    email: Optional[str] = None
    password: Optional[str] = None


class UserOut(BaseModel):
    """Public view of an account."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: Optional[str] = None
    email: str


class AuthResponse(BaseModel):
    """Token plus the account it was issued for."""
    message: str
    token: str
    user: UserOut


class MeResponse(BaseModel):
    user: UserOut


class FileOut(BaseModel):
    """Public view of a conversion record."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    original_name: str = Field(..., alias="originalName")
    image_url: str = Field(..., alias="imageUrl")
    created_at: str = Field(..., alias="createdAt", description="ISO 8601 timestamp")

    @classmethod
    def from_record(cls, record) -> "FileOut":
        created_at: datetime = record.created_at
        if created_at.tzinfo is None:
            # Stored as naive UTC
            created_at = created_at.replace(tzinfo=timezone.utc)
        return cls(
            id=record.id,
            original_name=record.original_name,
            image_url=record.image_url,
            created_at=created_at.isoformat(),
        )


class ConvertResponse(BaseModel):
    message: str
    file: FileOut


class FilesResponse(BaseModel):
    files: List[FileOut] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "example": {
                "files": [
                    {
                        "id": "5f0c7a4e-8a51-4c1e-9d0e-3f2b9b1e8c11",
                        "originalName": "report.pdf",
                        "imageUrl": "/api/files/1760860800000-9f3a1c2b-report.jpg",
                        "createdAt": "2025-10-19T08:00:00+00:00",
                    }
                ]
            }
        }
    }
