from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app.schemas.results import FormAnalyticsReport, ScoringResult


def score_band(percentage: int) -> str:
    if percentage >= 80:
        return "High"
    elif percentage >= 60:
        return "Medium"
    return "Low"


def format_answer(answer: Any) -> str:
    """Readable answer text for reports; lists are comma-joined."""
    if answer is None or answer == "" or answer == []:
        return "No answer"
    if isinstance(answer, list):
        return ", ".join(
            item.get("name", "") if isinstance(item, dict) else str(item)
            for item in answer
        )
    if isinstance(answer, dict):
        return ", ".join(f"{option}: {rank}" for option, rank in answer.items())
    return str(answer)


def generate_results_report(
    result: ScoringResult,
    form_title: str = "",
    submitter_name: Optional[str] = None,
    submitted_at: Optional[datetime] = None
) -> Dict[str, Any]:

    percentage = result.score_percent
    band = score_band(percentage)

    # -------------------------
    # SUMMARY
    # -------------------------
    if result.total_questions:
        summary = [
            f"{result.correct_count} of {result.total_questions} scored questions were answered correctly.",
            f"This corresponds to an overall score of {percentage}%.",
        ]
    else:
        summary = ["No questions with correct answers were found in this form."]

    # -------------------------
    # PER-QUESTION BREAKDOWN
    # -------------------------
    questions: List[Dict[str, Any]] = []
    correct: List[str] = []
    incorrect: List[str] = []

    for question in result.per_question:
        questions.append({
            "field_id": question.field_id,
            "label": question.field_label,
            "type": question.field_type,
            "user_answer": format_answer(question.user_answer),
            "correct_answer": format_answer(question.correct_answer),
            "is_correct": question.is_correct,
        })
        (correct if question.is_correct else incorrect).append(question.field_label)

    return {
        "form_title": form_title,
        "submitter": submitter_name,
        "submitted_at": submitted_at.isoformat() if submitted_at else None,
        "summary": summary,
        "scores": {
            "total_questions": result.total_questions,
            "correct_count": result.correct_count,
            "percentage": percentage,
            "band": band,
        },
        "correct": correct,
        "incorrect": incorrect,
        "questions": questions,
        "generated_at": datetime.now(timezone.utc).isoformat()
    }


def generate_analytics_report(report: FormAnalyticsReport) -> Dict[str, Any]:
    charts = []
    for item in report.fields:
        charts.append({
            "label": item.field.label,
            "type": item.field.type,
            "total_responses": item.total_responses,
            "rows": [
                {"name": bucket.name, "count": bucket.count, "percentage": bucket.percentage}
                for bucket in item.chart_data
            ],
        })

    return {
        "form_title": report.form_title or "Form Analytics",
        "total_submissions": report.total_submissions,
        "charts": charts,
        "generated_at": datetime.now(timezone.utc).isoformat()
    }
