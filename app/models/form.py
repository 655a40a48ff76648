import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, JSON, String, Uuid

from app.db.base import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =========================
# Published form snapshot
# =========================
class Form(Base):
    __tablename__ = "forms"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    form_title = Column(String(255), nullable=False, default="")

    # FormSchema document, camelCase keys as exported by the builder
    form_config = Column(JSON, nullable=False)

    status = Column(String(50), nullable=False, default="published")
    published = Column(Boolean, nullable=False, default=True)
    version = Column(Integer, nullable=False, default=1)

    created_by = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


# =========================
# Submission
# =========================
class FormSubmission(Base):
    __tablename__ = "form_submissions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    form_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("forms.id"),
        nullable=False,
        index=True,
    )

    answers = Column(JSON, nullable=False)
    score = Column(JSON, nullable=True)

    submitter_id = Column(String(255), nullable=True)
    submitter_name = Column(String(255), nullable=True)

    submitted_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


# =========================
# Push notification tokens
# =========================
class NotificationToken(Base):
    __tablename__ = "notification_tokens"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    user_id = Column(String(255), nullable=False, index=True)
    token = Column(String(512), unique=True, nullable=False)
    role = Column(String(50), nullable=False, default="user")

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
