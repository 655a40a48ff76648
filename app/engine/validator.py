# app/engine/validator.py

"""
REQUIRED-FIELD VALIDATION ENGINE

Decides whether an answer-set satisfies the "required" constraints of a page
or of a whole form. Emptiness is judged per answer shape through a single
rule table keyed by field type.

Called by the fill-out flow before every page advance and before the final
submit. All errors are reported at once, never first-error-only.
"""

from typing import Any, Callable, Dict, List, Optional
from collections.abc import Mapping, Sequence
import logging

from app.engine.field_types import AnswerShape, get_type_info
from app.schemas.form import Answers, FormField, FormSchema, Page
from app.schemas.results import PageValidationError, ValidationResult

logger = logging.getLogger(__name__)


def _is_blank_text(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _is_list(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _empty_scalar(value: Any) -> bool:
    # numbers (slider/rating) are answers, 0 included
    return _is_blank_text(value)


def _empty_sequence(value: Any) -> bool:
    return not _is_list(value) or len(value) == 0


def _empty_textboxes(value: Any) -> bool:
    if not _is_list(value):
        return True
    return all(_is_blank_text(item) for item in value)


def _empty_rank_map(value: Any) -> bool:
    return not isinstance(value, Mapping) or len(value) == 0


def _empty_files(value: Any) -> bool:
    if value is None:
        return True
    try:
        return len(value) == 0
    except TypeError:
        return True


EMPTINESS_RULES: Dict[AnswerShape, Callable[[Any], bool]] = {
    AnswerShape.SCALAR: _empty_scalar,
    AnswerShape.SEQUENCE: _empty_sequence,
    AnswerShape.TEXTBOXES: _empty_textboxes,
    AnswerShape.RANK_MAP: _empty_rank_map,
    AnswerShape.FILES: _empty_files,
}


def is_answer_empty(form_field: FormField, value: Any) -> bool:
    """Type-specific emptiness test used for required fields."""
    shape = get_type_info(form_field.type).answer_shape
    return EMPTINESS_RULES[shape](value)


def required_message(form_field: FormField) -> str:
    return f"{form_field.label} is required"


def validate_page(page: Page, answers: Optional[Answers]) -> ValidationResult:
    """
    Check every required field of one page.

    Returns field id -> message for each unanswered required field;
    an empty dict means the page may be advanced.
    """
    answers = answers or {}
    errors: ValidationResult = {}

    for form_field in page.fields:
        if not form_field.required:
            continue
        if is_answer_empty(form_field, answers.get(form_field.id)):
            errors[form_field.id] = required_message(form_field)

    if errors:
        logger.debug(f"Page {page.id}: {len(errors)} required field(s) missing")
    return errors


def validate_form(schema: FormSchema, answers: Optional[Answers]) -> ValidationResult:
    """Validate every page and merge; an earlier page's error is never overwritten."""
    merged: ValidationResult = {}
    for page in schema.pages:
        for field_id, message in validate_page(page, answers).items():
            merged.setdefault(field_id, message)
    return merged


def validate_form_by_page(
    schema: FormSchema,
    answers: Optional[Answers]
) -> List[PageValidationError]:
    """Same checks as validate_form, grouped by the page that introduced them."""
    grouped: List[PageValidationError] = []
    seen = set()

    for page_index, page in enumerate(schema.pages):
        errors = {
            field_id: message
            for field_id, message in validate_page(page, answers).items()
            if field_id not in seen
        }
        if not errors:
            continue
        seen.update(errors)
        grouped.append(PageValidationError(
            page_index=page_index,
            page_id=page.id,
            page_title=page.title,
            errors=errors,
        ))

    return grouped


def first_invalid_page(schema: FormSchema, answers: Optional[Answers]) -> Optional[int]:
    """Index of the first page that blocks submission, or None when the form is complete."""
    for page_index, page in enumerate(schema.pages):
        if validate_page(page, answers):
            return page_index
    return None
