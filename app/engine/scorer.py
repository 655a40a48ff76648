# app/engine/scorer.py

from typing import Any, Callable, Dict, List, Optional
from collections.abc import Mapping, Sequence
import json
import logging
import math

from app.engine.field_types import Comparison, get_type_info
from app.schemas.form import Answers, FormField, FormSchema
from app.schemas.results import QuestionResult, ScoringResult

logger = logging.getLogger(__name__)


def _is_list(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Mapping) or _is_list(value):
        return len(value) == 0
    return False


def percent(part: int, whole: int) -> int:
    """Whole-number percentage rounded half up; 0 when there is nothing to divide."""
    if whole <= 0:
        return 0
    return int(math.floor(part / whole * 100 + 0.5))


class FormScorer:
    """
    PURE RULE-BASED SCORING ENGINE.

    Compares each submitted answer against the field's declared correct
    answer and aggregates a percentage score. Deterministic, no I/O.

    Comparison rules (one per Comparison kind, see field_types):
    - SCALAR: trimmed, lower-cased string forms must be equal
    - OPTION_SET: same length and every expected option present (order-free)
    - RANK_MAP: every option's submitted rank equals the expected rank
    - NONE: file, image and multi-text are never graded
    """

    ENGINE_VERSION = "form_scorer_v1"

    def __init__(self):
        self._comparators: Dict[Comparison, Callable[[Any, Any], bool]] = {
            Comparison.SCALAR: self.compare_scalar,
            Comparison.OPTION_SET: self.compare_option_set,
            Comparison.RANK_MAP: self.compare_rank_map,
        }

    def _normalize_text(self, value: Any) -> str:
        """
        Normalize a scalar answer for comparison.

        Rules:
        1. None becomes empty
        2. Integral floats drop the trailing ".0" (5.0 == "5")
        3. Booleans use their lower-case names
        4. Trim and lower-case
        """
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if isinstance(value, (Mapping, list, tuple, set)):
            raise TypeError(f"Expected a scalar answer, got {type(value).__name__}")
        return str(value).strip().lower()

    # -------------------------------------------------
    # Comparison rules
    # -------------------------------------------------

    def compare_scalar(self, submitted: Any, expected: Any) -> bool:
        return self._normalize_text(submitted) == self._normalize_text(expected)

    def _expected_options(self, expected: Any) -> List[str]:
        if isinstance(expected, str):
            items = expected.split(",")
        elif _is_list(expected):
            items = list(expected)
        else:
            raise TypeError(f"Unsupported option list: {type(expected).__name__}")

        normalized = [self._normalize_text(item) for item in items]
        return [item for item in normalized if item]

    def compare_option_set(self, submitted: Any, expected: Any) -> bool:
        """Exact-set semantics: equal length and every expected option selected."""
        if not _is_list(submitted):
            return False

        expected_options = self._expected_options(expected)
        if not expected_options:
            raise ValueError("No expected options declared")
        selected = [self._normalize_text(item) for item in submitted]

        if len(selected) != len(expected_options):
            return False
        return all(option in selected for option in expected_options)

    def _normalize_rank(self, rank: Any) -> Any:
        text = self._normalize_text(rank)
        try:
            return int(text)
        except ValueError:
            return text

    def _rank_map(self, value: Any) -> Dict[str, Any]:
        if isinstance(value, str):
            value = json.loads(value)
        if not isinstance(value, Mapping):
            raise TypeError(f"Expected an option -> rank mapping, got {type(value).__name__}")
        return {
            self._normalize_text(option): self._normalize_rank(rank)
            for option, rank in value.items()
        }

    def compare_rank_map(self, submitted: Any, expected: Any) -> bool:
        if not isinstance(submitted, Mapping):
            return False
        return self._rank_map(submitted) == self._rank_map(expected)

    # -------------------------------------------------
    # Scoring pass
    # -------------------------------------------------

    def is_correct(self, form_field: FormField, submitted: Any) -> bool:
        """
        Apply the field's comparison rule.

        A missing or malformed correct answer, or an answer of the wrong
        shape, resolves to False; it never aborts the scoring pass.
        """
        comparator = self._comparators.get(get_type_info(form_field.type).comparison)
        if comparator is None:
            return False

        if _is_blank(form_field.correct_answer):
            logger.debug(f"Field {form_field.id}: no correct answer declared")
            return False

        try:
            return comparator(submitted, form_field.correct_answer)
        except (TypeError, ValueError, AttributeError) as e:
            logger.debug(f"Field {form_field.id}: not comparable ({e})")
            return False

    def score_field(self, form_field: FormField, answers: Answers) -> Optional[QuestionResult]:
        """Result for one field, or None when the field is not graded."""
        if not form_field.has_correct_answer:
            return None
        if not get_type_info(form_field.type).scorable:
            return None

        submitted = answers.get(form_field.id)
        return QuestionResult(
            field_id=form_field.id,
            field_label=form_field.label,
            field_type=form_field.type,
            user_answer=submitted,
            correct_answer=form_field.correct_answer,
            is_correct=self.is_correct(form_field, submitted),
        )

    def score(self, schema: FormSchema, answers: Optional[Answers]) -> ScoringResult:
        answers = answers or {}
        per_question: List[QuestionResult] = []

        for _, _, form_field in schema.iter_fields():
            result = self.score_field(form_field, answers)
            if result is not None:
                per_question.append(result)

        total = len(per_question)
        correct = sum(1 for result in per_question if result.is_correct)

        logger.debug(f"Scored '{schema.form_title}': {correct}/{total}")

        return ScoringResult(
            per_question=per_question,
            total_questions=total,
            correct_count=correct,
            score_percent=percent(correct, total),
        )


default_scorer = FormScorer()


def score(schema: FormSchema, answers: Optional[Answers]) -> ScoringResult:
    """Score one answer-set against the schema's declared correct answers."""
    return default_scorer.score(schema, answers)
