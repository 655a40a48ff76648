# app/engine/structure.py

"""
Structural checks for schemas coming from the editor (JSON import, API).

check_structure() guards the core engines: they assume a well-formed schema.
check_publishable() adds the rules a published snapshot must satisfy.
"""

from typing import Any, Dict, List
from collections.abc import Mapping
import json

from app.core.exceptions import SchemaStructureError
from app.engine.field_types import Comparison, get_type_info, is_option_bearing
from app.schemas.form import FormField, FormSchema


def check_structure(raw: Any) -> FormSchema:
    """
    Validate the raw document shape and build a FormSchema.

    Raises:
        SchemaStructureError: first structural problem found, with its position
    """
    if not isinstance(raw, Mapping):
        raise SchemaStructureError("Invalid JSON structure: expected an object")

    pages = raw.get("pages")
    if not isinstance(pages, list):
        raise SchemaStructureError("Invalid JSON structure: pages array is required")

    for index, page in enumerate(pages, start=1):
        if not isinstance(page, Mapping):
            raise SchemaStructureError(f"Page {index}: must be an object")
        if not page.get("id"):
            raise SchemaStructureError(f"Page {index}: id is required")
        if not page.get("title"):
            raise SchemaStructureError(f"Page {index}: title is required")
        if not isinstance(page.get("fields"), list):
            raise SchemaStructureError(f"Page {index}: fields array is required")

        for field_index, form_field in enumerate(page["fields"], start=1):
            where = f"Page {index}, Field {field_index}"
            if not isinstance(form_field, Mapping):
                raise SchemaStructureError(f"{where}: must be an object")
            for key in ("id", "type", "label"):
                if not form_field.get(key):
                    raise SchemaStructureError(f"{where}: {key} is required")

    try:
        return FormSchema.model_validate(raw)
    except ValueError as e:
        raise SchemaStructureError(f"Invalid JSON structure: {e}") from e


def parse_schema_json(content: str) -> FormSchema:
    """Parse an exported form configuration file."""
    try:
        raw = json.loads(content)
    except json.JSONDecodeError as e:
        raise SchemaStructureError(f"Invalid JSON: {e.msg}") from e
    return check_structure(raw)


def _correct_answer_problem(form_field: FormField) -> str:
    """Empty string when the declared correct answer fits the field type."""
    info = get_type_info(form_field.type)
    answer = form_field.correct_answer

    if info.comparison is Comparison.NONE:
        return ""
    if answer is None or (isinstance(answer, str) and not answer.strip()):
        return "correct answer is missing"

    if info.comparison is Comparison.OPTION_SET:
        if not isinstance(answer, (str, list)):
            return "correct answer must be a comma-separated list of options"
    elif info.comparison is Comparison.RANK_MAP:
        if isinstance(answer, str):
            try:
                answer = json.loads(answer)
            except json.JSONDecodeError:
                return "correct answer must be a JSON object of option rankings"
        if not isinstance(answer, Mapping):
            return "correct answer must be a JSON object of option rankings"
    elif isinstance(answer, (Mapping, list)):
        return "correct answer must be a single value"

    return ""


def check_publishable(schema: FormSchema) -> List[str]:
    """Problems that block publishing; an empty list means ready."""
    problems: List[str] = []

    if not schema.pages:
        problems.append("Form must contain at least one page")

    page_ids: Dict[str, int] = {}
    for page in schema.pages:
        page_ids[page.id] = page_ids.get(page.id, 0) + 1
    problems.extend(f"Duplicate page id '{page_id}'" for page_id, n in page_ids.items() if n > 1)

    field_ids: Dict[str, int] = {}
    for _, page, form_field in schema.iter_fields():
        field_ids[form_field.id] = field_ids.get(form_field.id, 0) + 1
        where = f"{page.title or page.id} / {form_field.label or form_field.id}"

        if is_option_bearing(form_field.type) and not form_field.options:
            problems.append(f"{where}: at least one option is required")

        if form_field.has_correct_answer:
            problem = _correct_answer_problem(form_field)
            if problem:
                problems.append(f"{where}: {problem}")

    problems.extend(f"Duplicate field id '{field_id}'" for field_id, n in field_ids.items() if n > 1)
    return problems
