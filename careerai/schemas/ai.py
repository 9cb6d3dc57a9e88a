from typing import Any

from pydantic import BaseModel, Field


class Job(BaseModel):
    id: str
    title: str
    company: str = ""
    ats: int = Field(ge=0, le=100)
    stage: str = "Suggested"
    date: str = ""


class OptimizedResume(BaseModel):
    optimized: str
    score: int | None = Field(default=None, ge=0, le=100)


class Gig(BaseModel):
    title: str
    desc: str = ""
    pay: str = ""


class DispatchResponse(BaseModel):
    result: str


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None


class NormalizeRequest(BaseModel):
    action: str
    text: str = ""


class NormalizeResponse(BaseModel):
    action: str
    result: Any
    shape: str
    fallback: str | None = None
