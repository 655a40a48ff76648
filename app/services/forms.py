# app/services/forms.py

from typing import Any, Dict, List, Optional, Tuple
from collections.abc import Mapping
import logging

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import (
    IncompleteSubmissionError,
    NotificationError,
    SchemaFrozenError,
    SchemaNotPublishableError,
)
from app.engine.analytics import build_form_analytics
from app.engine.field_types import AnswerShape, get_type_info
from app.engine.scorer import score
from app.engine.structure import check_publishable, check_structure
from app.engine.validator import validate_form, validate_form_by_page, validate_page
from app.models.form import Form, FormSubmission
from app.schemas.form import Answers, FileDescriptor, FormSchema
from app.schemas.results import FormAnalyticsReport, ScoringResult
from app.schemas.submission import (
    FormRead,
    Submission,
    SubmissionRead,
    ValidateResponse,
)
from app.services.notifications import Notifier, NullNotifier, publish_message
from app.services.repository import FormRepository, IdLike

logger = logging.getLogger(__name__)


def load_schema(form: Form) -> FormSchema:
    return FormSchema.model_validate(form.form_config)


def normalize_answers(schema: FormSchema, answers: Answers) -> Answers:
    """
    Keep only file metadata for file/image answers.

    Binary content is uploaded elsewhere; the stored answer is a list of
    {name, size, type, lastModified}.
    """
    normalized = dict(answers)
    for _, _, form_field in schema.iter_fields():
        if get_type_info(form_field.type).answer_shape is not AnswerShape.FILES:
            continue

        value = normalized.get(form_field.id)
        if not value:
            continue
        if isinstance(value, Mapping):
            value = [value]
        if not isinstance(value, list) or not all(isinstance(item, Mapping) for item in value):
            raise ValueError(f"{form_field.label}: expected a list of file descriptors")

        normalized[form_field.id] = [
            FileDescriptor.model_validate(item).to_document() for item in value
        ]
    return normalized


class FormService:
    """
    Orchestrates the pure engines around persistence and notifications.

    One instance per request; the repository shares the request's session.
    """

    def __init__(self, db: Session, notifier: Optional[Notifier] = None):
        self.repository = FormRepository(db)
        self.notifier = notifier or NullNotifier()

    # ==============================
    # Forms
    # ==============================
    def _checked_schema(self, raw_config: Dict[str, Any]) -> FormSchema:
        schema = check_structure(raw_config)
        problems = check_publishable(schema)
        if problems:
            raise SchemaNotPublishableError(problems)
        return schema

    def publish_form(
        self,
        raw_config: Dict[str, Any],
        created_by: Optional[str] = None,
        notify: bool = True,
    ) -> Tuple[Form, int]:
        """
        Store an immutable snapshot of the schema and announce it.

        A failed notification is logged and does not undo the publish.
        """
        schema = self._checked_schema(raw_config)
        form = self.repository.create_form(schema.to_document(), created_by=created_by)
        logger.info(f"Published form {form.id} '{schema.form_title}'")

        notified = 0
        if notify:
            recipients = self.repository.list_notification_tokens()
            try:
                result = self.notifier.send(
                    recipients,
                    settings.NOTIFICATION_TITLE,
                    publish_message(schema.form_title),
                    form_id=str(form.id),
                )
                notified = int(result.get("sent", len(recipients)) or 0)
            except NotificationError as e:
                logger.error(f"Error sending notification for form {form.id}: {e}")

        return form, notified

    def get_form(self, form_id: IdLike) -> Form:
        return self.repository.get_form(form_id)

    def get_schema(self, form_id: IdLike) -> FormSchema:
        return load_schema(self.repository.get_form(form_id))

    def read_form(self, form: Form) -> FormRead:
        return FormRead(
            id=form.id,
            form_title=form.form_title,
            form_config=load_schema(form),
            status=form.status,
            published=form.published,
            version=form.version,
            created_by=form.created_by,
            created_at=form.created_at,
            updated_at=form.updated_at,
            submission_count=self.repository.count_submissions(form.id),
        )

    def list_forms(self) -> List[FormRead]:
        return [self.read_form(form) for form in self.repository.list_forms()]

    def update_form(self, form_id: IdLike, raw_config: Dict[str, Any]) -> Form:
        """Replace the schema of a form that nobody has answered yet."""
        form = self.repository.get_form(form_id)

        count = self.repository.count_submissions(form.id)
        if count > 0:
            raise SchemaFrozenError(str(form.id), count)

        schema = self._checked_schema(raw_config)
        form = self.repository.update_form(form, schema.to_document())
        logger.info(f"Updated form {form.id} to version {form.version}")
        return form

    # ==============================
    # Fill-out
    # ==============================
    def validate_answers(
        self,
        form_id: IdLike,
        answers: Answers,
        page_index: Optional[int] = None,
    ) -> ValidateResponse:
        schema = self.get_schema(form_id)

        if page_index is not None:
            if page_index >= len(schema.pages):
                raise IndexError(f"Page index {page_index} out of range")
            errors = validate_page(schema.pages[page_index], answers)
            pages = [
                group for group in validate_form_by_page(schema, answers)
                if group.page_index == page_index
            ]
        else:
            errors = validate_form(schema, answers)
            pages = validate_form_by_page(schema, answers)

        return ValidateResponse(valid=not errors, errors=errors, pages=pages)

    def submit(
        self,
        form_id: IdLike,
        answers: Answers,
        submitter_id: Optional[str] = None,
        submitter_name: Optional[str] = None,
    ) -> Tuple[FormSubmission, ScoringResult]:
        form = self.repository.get_form(form_id)
        schema = load_schema(form)

        pages = validate_form_by_page(schema, answers)
        if pages:
            logger.info(f"Rejected submission for form {form.id}: {len(pages)} page(s) incomplete")
            raise IncompleteSubmissionError(pages)

        answers = normalize_answers(schema, answers)
        result = score(schema, answers)

        submission = self.repository.create_submission(
            form.id,
            answers,
            score=result.to_document(),
            submitter_id=submitter_id,
            submitter_name=submitter_name,
        )
        logger.info(
            f"Stored submission {submission.id} for form {form.id} "
            f"(score {result.score_percent}%)"
        )
        return submission, result

    # ==============================
    # Results
    # ==============================
    def score_submission(self, submission: FormSubmission) -> ScoringResult:
        """Recompute the score against the form snapshot the submission answered."""
        form = self.repository.get_form(submission.form_id)
        return score(load_schema(form), submission.answers or {})

    def read_submission(self, submission: FormSubmission) -> SubmissionRead:
        return SubmissionRead(
            id=submission.id,
            form_id=submission.form_id,
            answers=submission.answers or {},
            submitted_at=submission.submitted_at,
            submitter_identity=submission.submitter_id,
            submitter_name=submission.submitter_name,
            score=self.score_submission(submission),
        )

    def get_submission(self, submission_id: IdLike) -> SubmissionRead:
        return self.read_submission(self.repository.get_submission(submission_id))

    def list_submissions(self, form_id: IdLike) -> List[SubmissionRead]:
        form = self.repository.get_form(form_id)
        schema = load_schema(form)
        return [
            SubmissionRead(
                id=submission.id,
                form_id=submission.form_id,
                answers=submission.answers or {},
                submitted_at=submission.submitted_at,
                submitter_identity=submission.submitter_id,
                submitter_name=submission.submitter_name,
                score=score(schema, submission.answers or {}),
            )
            for submission in self.repository.list_submissions(form.id)
        ]

    def analytics(self, form_id: IdLike) -> FormAnalyticsReport:
        form = self.repository.get_form(form_id)
        submissions = [
            Submission(
                form_id=str(row.form_id),
                answers=row.answers or {},
                submitted_at=row.submitted_at,
                submitter_identity=row.submitter_id,
            )
            for row in self.repository.list_submissions(form.id)
        ]
        return build_form_analytics(str(form.id), load_schema(form), submissions, form.form_title)
