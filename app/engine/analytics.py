# app/engine/analytics.py

"""
ANALYTICS AGGREGATOR

Tallies submitted answers of summarizable fields (radio, select, checkbox,
boolean, ranking) into per-option distributions.

BUCKETING RULES:
- radio / select: one bucket per submitted value
- checkbox: one increment per selected value
- boolean: "yes" -> "Yes", anything else -> "No"
- ranking: one bucket per observed (option, rank) pair, "<option> (Rank <rank>)"

totalResponses counts non-empty answers for the field, not submissions.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional
from collections.abc import Mapping, Sequence
import logging

from app.engine.field_types import FieldType
from app.engine.scorer import percent
from app.schemas.form import Answers, FormField, FormSchema
from app.schemas.results import ChartBucket, FieldAnalytics, FormAnalyticsReport

logger = logging.getLogger(__name__)


def _label(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def _bucket_single(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str) and not value.strip():
        return []
    if isinstance(value, (Mapping, list, tuple)):
        return []
    return [_label(value)]


def _bucket_many(value: Any) -> List[str]:
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes)):
        return []
    return [bucket for option in value for bucket in _bucket_single(option)]


def _bucket_boolean(value: Any) -> List[str]:
    return ["Yes" if value == "yes" else "No"]


def _bucket_ranking(value: Any) -> List[str]:
    if not isinstance(value, Mapping):
        return []
    return [f"{option} (Rank {_label(rank)})" for option, rank in value.items()]


TALLY_RULES: Dict[FieldType, Callable[[Any], List[str]]] = {
    FieldType.RADIO: _bucket_single,
    FieldType.SELECT: _bucket_single,
    FieldType.CHECKBOX: _bucket_many,
    FieldType.BOOLEAN: _bucket_boolean,
    FieldType.RANKING: _bucket_ranking,
}


def _has_answer(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, (Mapping, list, tuple)):
        return len(value) > 0
    return True


def _answers_of(submission: Any) -> Answers:
    """Accept Submission models, raw documents or bare answer dicts."""
    if hasattr(submission, "answers"):
        return submission.answers or {}
    if isinstance(submission, Mapping):
        inner = submission.get("answers")
        if isinstance(inner, Mapping):
            return inner
        return submission
    return {}


def aggregate_field(form_field: FormField, answer_sets: Iterable[Answers]) -> FieldAnalytics:
    """Distribution for one summarizable field across all answer-sets."""
    rule = TALLY_RULES[form_field.field_type]
    option_counts: Dict[str, int] = {}
    total_responses = 0

    for answers in answer_sets:
        value = answers.get(form_field.id)
        if not _has_answer(value):
            continue

        buckets = rule(value)
        if not buckets:
            continue

        total_responses += 1
        for bucket in buckets:
            option_counts[bucket] = option_counts.get(bucket, 0) + 1

    # sorted() is stable, ties keep first-seen order
    chart_data = sorted(
        (
            ChartBucket(
                name=name,
                count=count,
                percentage=percent(count, total_responses),
            )
            for name, count in option_counts.items()
        ),
        key=lambda bucket: bucket.count,
        reverse=True,
    )

    return FieldAnalytics(
        field=form_field,
        total_responses=total_responses,
        option_counts=option_counts,
        chart_data=chart_data,
    )


def aggregate(schema: FormSchema, submissions: Iterable[Any]) -> List[FieldAnalytics]:
    """
    Per-question distributions in page-then-field order.

    Fields that end up with no buckets are left out, so an empty submission
    set yields an empty list.
    """
    answer_sets = [_answers_of(submission) for submission in submissions]
    results: List[FieldAnalytics] = []

    for _, _, form_field in schema.iter_fields():
        if form_field.field_type not in TALLY_RULES:
            continue

        analytics = aggregate_field(form_field, answer_sets)
        if analytics.chart_data:
            results.append(analytics)

    logger.debug(
        f"Aggregated {len(answer_sets)} submission(s) into {len(results)} chart(s)"
    )
    return results


def build_form_analytics(
    form_id: str,
    schema: FormSchema,
    submissions: Iterable[Any],
    form_title: Optional[str] = None
) -> FormAnalyticsReport:
    submissions = list(submissions)
    return FormAnalyticsReport(
        form_id=form_id,
        form_title=form_title or schema.form_title,
        total_submissions=len(submissions),
        fields=aggregate(schema, submissions),
    )
