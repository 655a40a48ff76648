# app/engine/field_types.py

"""
FIELD TYPE REGISTRY
Closed set of supported field types and their per-type metadata.

Every other engine (validation, scoring, analytics, editor) reads field
behaviour from this table instead of switching on raw type strings.

UNKNOWN TYPES:
A type string that is not in the registry resolves to TEXT everywhere.
Legacy schemas rely on this, so it is a documented default and not an error.
"""

from typing import Dict, Any, Optional, Union
from dataclasses import dataclass, field
from enum import Enum
import copy


class FieldType(str, Enum):
    """Supported field types."""
    TEXT = "text"
    TEXTAREA = "textarea"
    MULTI_TEXT = "multi-text"
    SELECT = "select"
    MULTI_SELECT = "multi-select"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    BOOLEAN = "boolean"
    SLIDER = "slider"
    RATING = "rating"
    FILE = "file"
    IMAGE = "image"
    RANKING = "ranking"


class AnswerShape(str, Enum):
    """Shape of the value a field stores in an answer-set."""
    SCALAR = "scalar"          # plain string (or number for slider/rating)
    SEQUENCE = "sequence"      # list of option strings
    TEXTBOXES = "textboxes"    # list of strings, one per textbox
    RANK_MAP = "rank_map"      # option -> rank
    FILES = "files"            # list of file descriptors


class Comparison(str, Enum):
    """How a submitted answer is compared to the declared correct answer."""
    SCALAR = "scalar"
    OPTION_SET = "option_set"
    RANK_MAP = "rank_map"
    NONE = "none"


DEFAULT_OPTIONS = ["Option 1", "Option 2"]
BOOLEAN_OPTIONS = ["Yes", "No"]


@dataclass(frozen=True)
class FieldTypeInfo:
    """Static metadata for one field type."""
    field_type: FieldType
    answer_shape: AnswerShape
    comparison: Comparison
    option_bearing: bool = False
    numeric_range: bool = False
    multi_valued: bool = False
    summarizable: bool = False
    answers_by_default: bool = False
    defaults: Dict[str, Any] = field(default_factory=dict)
    correct_answer_hint: str = "The exact answer to validate against"

    @property
    def scorable(self) -> bool:
        return self.comparison is not Comparison.NONE


_REGISTRY: Dict[FieldType, FieldTypeInfo] = {
    FieldType.TEXT: FieldTypeInfo(
        FieldType.TEXT, AnswerShape.SCALAR, Comparison.SCALAR,
        answers_by_default=True,
    ),
    FieldType.TEXTAREA: FieldTypeInfo(
        FieldType.TEXTAREA, AnswerShape.SCALAR, Comparison.SCALAR,
        answers_by_default=True,
    ),
    FieldType.MULTI_TEXT: FieldTypeInfo(
        FieldType.MULTI_TEXT, AnswerShape.TEXTBOXES, Comparison.NONE,
        multi_valued=True,
        defaults={"textboxCount": 2},
    ),
    FieldType.SELECT: FieldTypeInfo(
        FieldType.SELECT, AnswerShape.SCALAR, Comparison.SCALAR,
        option_bearing=True, summarizable=True, answers_by_default=True,
        defaults={"options": DEFAULT_OPTIONS},
        correct_answer_hint="Must match one of the available options exactly",
    ),
    FieldType.MULTI_SELECT: FieldTypeInfo(
        FieldType.MULTI_SELECT, AnswerShape.SEQUENCE, Comparison.OPTION_SET,
        option_bearing=True, multi_valued=True, answers_by_default=True,
        defaults={"options": DEFAULT_OPTIONS},
        correct_answer_hint="For multiple selections, separate answers with commas",
    ),
    FieldType.RADIO: FieldTypeInfo(
        FieldType.RADIO, AnswerShape.SCALAR, Comparison.SCALAR,
        option_bearing=True, summarizable=True, answers_by_default=True,
        defaults={"options": DEFAULT_OPTIONS},
        correct_answer_hint="Must match one of the available options exactly",
    ),
    FieldType.CHECKBOX: FieldTypeInfo(
        FieldType.CHECKBOX, AnswerShape.SEQUENCE, Comparison.OPTION_SET,
        option_bearing=True, multi_valued=True, summarizable=True,
        answers_by_default=True,
        defaults={"options": DEFAULT_OPTIONS},
        correct_answer_hint="For multiple selections, separate answers with commas",
    ),
    FieldType.BOOLEAN: FieldTypeInfo(
        FieldType.BOOLEAN, AnswerShape.SCALAR, Comparison.SCALAR,
        option_bearing=True, summarizable=True, answers_by_default=True,
        defaults={"options": BOOLEAN_OPTIONS},
        correct_answer_hint='Enter either "Yes" or "No"',
    ),
    FieldType.SLIDER: FieldTypeInfo(
        FieldType.SLIDER, AnswerShape.SCALAR, Comparison.SCALAR,
        numeric_range=True, answers_by_default=True,
        defaults={"min": 0, "max": 100},
        correct_answer_hint="Enter the target value on the slider",
    ),
    FieldType.RATING: FieldTypeInfo(
        FieldType.RATING, AnswerShape.SCALAR, Comparison.SCALAR,
        answers_by_default=True,
        correct_answer_hint="Enter the target star rating (1-5)",
    ),
    FieldType.FILE: FieldTypeInfo(
        FieldType.FILE, AnswerShape.FILES, Comparison.NONE,
        multi_valued=True,
        defaults={"multiple": False},
    ),
    FieldType.IMAGE: FieldTypeInfo(
        FieldType.IMAGE, AnswerShape.FILES, Comparison.NONE,
        multi_valued=True,
        defaults={"multiple": False},
    ),
    FieldType.RANKING: FieldTypeInfo(
        FieldType.RANKING, AnswerShape.RANK_MAP, Comparison.RANK_MAP,
        option_bearing=True, summarizable=True, answers_by_default=True,
        defaults={"options": DEFAULT_OPTIONS},
        correct_answer_hint="Enter rankings as JSON object where keys are options and values are ranks",
    ),
}


TypeLike = Union[FieldType, str, None]


def resolve_field_type(raw: TypeLike) -> FieldType:
    """Map a raw type string onto the registry; unknown types become TEXT."""
    if isinstance(raw, FieldType):
        return raw
    try:
        return FieldType(raw)
    except ValueError:
        return FieldType.TEXT


def get_type_info(raw: TypeLike) -> FieldTypeInfo:
    return _REGISTRY[resolve_field_type(raw)]


def is_option_bearing(raw: TypeLike) -> bool:
    return get_type_info(raw).option_bearing


def is_numeric_range(raw: TypeLike) -> bool:
    return get_type_info(raw).numeric_range


def is_multi_valued(raw: TypeLike) -> bool:
    return get_type_info(raw).multi_valued


def is_scorable(raw: TypeLike) -> bool:
    """file, image and multi-text are never graded."""
    return get_type_info(raw).scorable


def is_summarizable(raw: TypeLike) -> bool:
    return get_type_info(raw).summarizable


def answers_by_default(raw: TypeLike) -> bool:
    return get_type_info(raw).answers_by_default


def correct_answer_hint(raw: TypeLike) -> str:
    return get_type_info(raw).correct_answer_hint


def default_attributes_for(raw: TypeLike) -> Dict[str, Any]:
    """
    Attribute skeleton a newly added field of this type should carry.

    Returns a fresh copy on every call so callers may mutate it.
    """
    return copy.deepcopy(get_type_info(raw).defaults)


def summarizable_types() -> Dict[FieldType, FieldTypeInfo]:
    return {t: info for t, info in _REGISTRY.items() if info.summarizable}


def type_label(raw: Optional[str]) -> str:
    """Display label used for new fields, e.g. "Checkbox Field"."""
    name = raw or FieldType.TEXT.value
    return f"{name[:1].upper()}{name[1:]} Field"
