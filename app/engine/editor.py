# app/engine/editor.py

"""
Schema editing helpers used by the form builder.

Every function returns a new FormSchema and leaves its input untouched,
so editor state can be passed around explicitly instead of being shared.
A form never ends up with zero pages.
"""

from typing import Any, Dict, Optional
import uuid

from app.engine.field_types import (
    FieldType,
    answers_by_default,
    default_attributes_for,
    get_type_info,
    is_numeric_range,
    is_option_bearing,
    type_label,
)
from app.schemas.form import FormField, FormSchema, Page


# attributes owned by a specific field type, reset when the type changes
TYPE_SPECIFIC_ATTRIBUTES = ("options", "min", "max", "textbox_count", "multiple")


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def new_page(title: str = "New Page") -> Page:
    return Page(id=new_id("page"), title=title, description="", fields=[])


def new_field(field_type: str = FieldType.TEXT.value) -> FormField:
    """A field of the given type with the registry's default attributes."""
    attributes = default_attributes_for(field_type)
    has_answer = answers_by_default(field_type)
    return FormField.model_validate({
        "id": new_id("field"),
        "type": field_type,
        "label": type_label(field_type),
        "placeholder": "",
        "required": False,
        "hasCorrectAnswer": has_answer,
        "correctAnswer": "",
        **attributes,
    })


def new_form_schema(form_title: str = "Form Title") -> FormSchema:
    page = new_page("Page 1")
    page.fields.append(FormField(
        id=new_id("field"),
        type=FieldType.TEXT.value,
        label="Text Field",
        placeholder="Enter text",
        required=False,
    ))
    return FormSchema(form_title=form_title, pages=[page])


def _copy(schema: FormSchema) -> FormSchema:
    return schema.model_copy(deep=True)


def _check_page_index(schema: FormSchema, page_index: int) -> None:
    if not 0 <= page_index < len(schema.pages):
        raise IndexError(f"Page index {page_index} out of range")


# =========================
# Pages
# =========================
def add_page(schema: FormSchema, title: Optional[str] = None) -> FormSchema:
    updated = _copy(schema)
    updated.pages.append(new_page(title or f"Page {len(updated.pages) + 1}"))
    return updated


def remove_page(schema: FormSchema, page_index: int) -> FormSchema:
    """Remove a page; removing the last one leaves a fresh empty page."""
    _check_page_index(schema, page_index)
    updated = _copy(schema)
    del updated.pages[page_index]
    if not updated.pages:
        updated.pages.append(new_page())
    return updated


def update_page(schema: FormSchema, page_index: int, **changes: Any) -> FormSchema:
    _check_page_index(schema, page_index)
    updated = _copy(schema)
    page = updated.pages[page_index]
    updated.pages[page_index] = page.model_copy(update=changes)
    return updated


# =========================
# Fields
# =========================
def add_field(
    schema: FormSchema,
    page_index: int,
    field_type: str = FieldType.TEXT.value
) -> FormSchema:
    _check_page_index(schema, page_index)
    updated = _copy(schema)
    updated.pages[page_index].fields.append(new_field(field_type))
    return updated


def remove_field(schema: FormSchema, page_index: int, field_id: str) -> FormSchema:
    _check_page_index(schema, page_index)
    updated = _copy(schema)
    page = updated.pages[page_index]
    page.fields = [form_field for form_field in page.fields if form_field.id != field_id]
    return updated


def update_field(schema: FormSchema, field_id: str, **changes: Any) -> FormSchema:
    updated = _copy(schema)
    for page in updated.pages:
        page.fields = [
            form_field.model_copy(update=changes) if form_field.id == field_id else form_field
            for form_field in page.fields
        ]
    return updated


def _retyped(form_field: FormField, field_type: str) -> FormField:
    data: Dict[str, Any] = form_field.model_dump()
    for key in TYPE_SPECIFIC_ATTRIBUTES:
        data[key] = None

    has_answer = answers_by_default(field_type)
    data.update(
        type=field_type,
        label=type_label(field_type),
        has_correct_answer=has_answer,
        correct_answer=(form_field.correct_answer or "") if has_answer else "",
    )

    defaults = default_attributes_for(field_type)
    info = get_type_info(field_type)

    if info.field_type is FieldType.BOOLEAN:
        data["options"] = defaults["options"]
    elif is_option_bearing(field_type):
        data["options"] = form_field.options or defaults["options"]
    else:
        data["options"] = []

    if is_numeric_range(field_type):
        data["min"] = form_field.min if form_field.min is not None else defaults["min"]
        data["max"] = form_field.max if form_field.max is not None else defaults["max"]
    if "textboxCount" in defaults:
        data["textbox_count"] = form_field.textbox_count or defaults["textboxCount"]
    if "multiple" in defaults:
        data["multiple"] = bool(form_field.multiple)

    return FormField.model_validate(data)


def change_field_type(schema: FormSchema, field_id: str, field_type: str) -> FormSchema:
    """
    Switch a field to another type, resetting type-specific attributes.

    Existing options, slider bounds and textbox counts carry over when the
    new type uses them.
    """
    updated = _copy(schema)
    for page in updated.pages:
        page.fields = [
            _retyped(form_field, field_type) if form_field.id == field_id else form_field
            for form_field in page.fields
        ]
    return updated


def set_correct_answer_flag(schema: FormSchema, field_id: str, has_answer: bool) -> FormSchema:
    """Toggle grading for a field; turning it off clears the stored answer."""
    updated = _copy(schema)
    for page in updated.pages:
        for index, form_field in enumerate(page.fields):
            if form_field.id != field_id:
                continue
            page.fields[index] = form_field.model_copy(update={
                "has_correct_answer": has_answer,
                "correct_answer": form_field.correct_answer if has_answer else "",
            })
    return updated
