# app/schemas/results.py

from typing import Any, Dict, List, Optional

from pydantic import Field

from app.schemas.form import CamelModel, FormField


# field id -> "<label> is required"; empty means valid
ValidationResult = Dict[str, str]


class PageValidationError(CamelModel):
    """Errors introduced by a single page, so the caller can jump back to it."""
    page_index: int
    page_id: str
    page_title: str = ""
    errors: ValidationResult = Field(default_factory=dict)


# =========================
# Scoring
# =========================
class QuestionResult(CamelModel):
    field_id: str
    field_label: str
    field_type: str
    user_answer: Optional[Any] = None
    correct_answer: Optional[Any] = None
    is_correct: bool = False


class ScoringResult(CamelModel):
    per_question: List[QuestionResult] = Field(default_factory=list)
    total_questions: int = 0
    correct_count: int = 0
    score_percent: int = Field(0, ge=0, le=100)


# =========================
# Analytics
# =========================
class ChartBucket(CamelModel):
    name: str
    count: int
    percentage: int


class FieldAnalytics(CamelModel):
    field: FormField
    total_responses: int = 0
    option_counts: Dict[str, int] = Field(default_factory=dict)
    chart_data: List[ChartBucket] = Field(default_factory=list)


class FormAnalyticsReport(CamelModel):
    form_id: str
    form_title: str = ""
    total_submissions: int = 0
    fields: List[FieldAnalytics] = Field(default_factory=list)
