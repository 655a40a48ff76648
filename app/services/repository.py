# app/services/repository.py

from typing import Any, Dict, List, Optional, Union
import uuid

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.models.form import Form, FormSubmission, NotificationToken

IdLike = Union[str, uuid.UUID]


def parse_id(value: IdLike, kind: str = "form") -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise NotFoundError(f"Invalid {kind} ID")


class FormRepository:
    """
    Persistence for form snapshots, submissions and notification tokens.

    Thin CRUD over the SQLAlchemy session; commits are explicit so a
    service call maps to one transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    # -------------------------------
    # Forms
    # -------------------------------
    def get_form(self, form_id: IdLike) -> Form:
        form = self.db.query(Form).filter(Form.id == parse_id(form_id)).first()
        if not form:
            raise NotFoundError("Form not found")
        return form

    def list_forms(self, published_only: bool = False) -> List[Form]:
        query = self.db.query(Form)
        if published_only:
            query = query.filter(Form.published.is_(True))
        return query.order_by(Form.created_at.desc()).all()

    def create_form(
        self,
        form_config: Dict[str, Any],
        created_by: Optional[str] = None
    ) -> Form:
        form = Form(
            form_title=form_config.get("formTitle", ""),
            form_config=form_config,
            status="published",
            published=True,
            created_by=created_by,
        )
        self.db.add(form)
        self.db.commit()
        self.db.refresh(form)
        return form

    def update_form(self, form: Form, form_config: Dict[str, Any]) -> Form:
        form.form_config = form_config
        form.form_title = form_config.get("formTitle", "")
        form.version = (form.version or 1) + 1
        self.db.commit()
        self.db.refresh(form)
        return form

    # -------------------------------
    # Submissions
    # -------------------------------
    def count_submissions(self, form_id: IdLike) -> int:
        return (
            self.db.query(func.count(FormSubmission.id))
            .filter(FormSubmission.form_id == parse_id(form_id))
            .scalar()
        ) or 0

    def list_submissions(self, form_id: IdLike) -> List[FormSubmission]:
        return (
            self.db.query(FormSubmission)
            .filter(FormSubmission.form_id == parse_id(form_id))
            .order_by(FormSubmission.submitted_at)
            .all()
        )

    def get_submission(self, submission_id: IdLike) -> FormSubmission:
        submission = (
            self.db.query(FormSubmission)
            .filter(FormSubmission.id == parse_id(submission_id, "submission"))
            .first()
        )
        if not submission:
            raise NotFoundError("Submission not found")
        return submission

    def create_submission(
        self,
        form_id: IdLike,
        answers: Dict[str, Any],
        score: Optional[Dict[str, Any]] = None,
        submitter_id: Optional[str] = None,
        submitter_name: Optional[str] = None,
    ) -> FormSubmission:
        submission = FormSubmission(
            form_id=parse_id(form_id),
            answers=answers,
            score=score,
            submitter_id=submitter_id,
            submitter_name=submitter_name,
        )
        self.db.add(submission)
        self.db.commit()
        self.db.refresh(submission)
        return submission

    # -------------------------------
    # Notification tokens
    # -------------------------------
    def list_notification_tokens(self, role: str = "user") -> List[str]:
        rows = (
            self.db.query(NotificationToken.token)
            .filter(NotificationToken.role == role)
            .all()
        )
        return [row.token for row in rows if row.token]

    def save_notification_token(self, user_id: str, token: str, role: str = "user") -> NotificationToken:
        existing = (
            self.db.query(NotificationToken)
            .filter(NotificationToken.token == token)
            .first()
        )
        if existing:
            existing.user_id = user_id
            existing.role = role
            self.db.commit()
            return existing

        record = NotificationToken(user_id=user_id, token=token, role=role)
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record
