from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class ApplicationCreate(BaseModel):
    job: dict[str, Any]
    cover_letter: str = Field(default="", max_length=50000)


class ApplicationResponse(BaseModel):
    id: str
    user_id: str
    job: dict[str, Any]
    cover_letter: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class BulkApplyRequest(BaseModel):
    jobs: list[dict[str, Any]]
    resume_text: str = Field(default="", max_length=50000)


class BulkApplyFailureResponse(BaseModel):
    index: int
    title: str
    step: str
    error: str


class BulkApplyResponse(BaseModel):
    processed: int
    saved: int
    failures: list[BulkApplyFailureResponse]
