# app/schemas/form.py

from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.engine.field_types import FieldType, resolve_field_type


# Answer value shapes depend on the field type, see app.engine.field_types.AnswerShape
Answers = Dict[str, Any]


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire (matches stored documents)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# =========================
# Form definition
# =========================
class FormField(CamelModel):
    """
    A single question within a page.

    `type` keeps the raw string so legacy schemas with unknown types
    round-trip unchanged; engines read `field_type` which falls back to TEXT.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: str
    type: str = FieldType.TEXT.value
    label: str = ""
    placeholder: Optional[str] = None
    required: bool = False

    options: Optional[List[str]] = None
    min: Optional[Union[int, float]] = None
    max: Optional[Union[int, float]] = None
    textbox_count: Optional[int] = Field(None, ge=1)
    multiple: Optional[bool] = None

    has_correct_answer: bool = False
    correct_answer: Optional[Any] = None

    @property
    def field_type(self) -> FieldType:
        return resolve_field_type(self.type)


class Page(CamelModel):
    id: str
    title: str = ""
    description: Optional[str] = None
    fields: List[FormField] = Field(default_factory=list)


class FormSchema(CamelModel):
    form_title: str = ""
    pages: List[Page] = Field(default_factory=list)

    def iter_fields(self) -> Iterator[Tuple[int, Page, FormField]]:
        """Yield (page_index, page, field) in page-then-field order."""
        for page_index, page in enumerate(self.pages):
            for form_field in page.fields:
                yield page_index, page, form_field

    def find_field(self, field_id: str) -> Optional[FormField]:
        for _, _, form_field in self.iter_fields():
            if form_field.id == field_id:
                return form_field
        return None

    def field_ids(self) -> List[str]:
        return [form_field.id for _, _, form_field in self.iter_fields()]


# =========================
# Answer payload pieces
# =========================
class FileDescriptor(CamelModel):
    """Metadata kept for an uploaded file; the binary itself is stored elsewhere."""

    name: str
    size: int = 0
    type: str = ""
    last_modified: Optional[int] = None
