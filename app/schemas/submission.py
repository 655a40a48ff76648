# app/schemas/submission.py

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import Field

from app.schemas.form import Answers, CamelModel, FormSchema
from app.schemas.results import PageValidationError, ScoringResult, ValidationResult


# =========================
# Forms
# =========================
class FormCreateRequest(CamelModel):
    """Raw builder output; structure is checked before it becomes a FormSchema."""
    form_config: Dict[str, Any]
    notify: bool = True


class FormRead(CamelModel):
    id: UUID
    form_title: str
    form_config: FormSchema
    status: str
    published: bool
    version: int
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    submission_count: int = 0


class PublishResponse(CamelModel):
    id: UUID
    form_title: str
    published: bool
    created_at: datetime
    notified: int = 0


# =========================
# Fill-out validation
# =========================
class ValidateRequest(CamelModel):
    answers: Answers = Field(default_factory=dict)
    page_index: Optional[int] = Field(None, ge=0)


class ValidateResponse(CamelModel):
    valid: bool
    errors: ValidationResult = Field(default_factory=dict)
    pages: List[PageValidationError] = Field(default_factory=list)


# =========================
# Submissions
# =========================
class Submission(CamelModel):
    """What the engines consume: the answers plus who sent them and when."""
    form_id: str
    answers: Answers = Field(default_factory=dict)
    submitted_at: Optional[datetime] = None
    submitter_identity: Optional[str] = None


class SubmissionCreate(CamelModel):
    answers: Answers = Field(default_factory=dict)
    submitter_name: Optional[str] = None


class SubmissionRead(CamelModel):
    id: UUID
    form_id: UUID
    answers: Answers
    submitted_at: datetime
    submitter_identity: Optional[str] = None
    submitter_name: Optional[str] = None
    score: Optional[ScoringResult] = None
