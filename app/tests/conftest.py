import copy

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.db.base import Base
from app.db.session import build_engine, build_session_factory, get_db
from app.main import app
from app.models import form as form_models  # noqa: F401  (registers tables)
from app.schemas.form import FormSchema
from app.services.notifications import get_notifier


SAMPLE_CONFIG = {
    "formTitle": "Customer Survey",
    "pages": [
        {
            "id": "page_1",
            "title": "About You",
            "description": "",
            "fields": [
                {"id": "name", "type": "text", "label": "Name", "required": True,
                 "hasCorrectAnswer": True, "correctAnswer": "Pavithra"},
                {"id": "gender", "type": "radio", "label": "Gender", "required": False,
                 "options": ["Male", "Female"], "hasCorrectAnswer": True, "correctAnswer": "Female"},
                {"id": "interests", "type": "checkbox", "label": "Interests", "required": True,
                 "options": ["Technology", "Sports", "Music"],
                 "hasCorrectAnswer": True, "correctAnswer": "Technology, Sports"},
            ],
        },
        {
            "id": "page_2",
            "title": "Feedback",
            "fields": [
                {"id": "recommend", "type": "boolean", "label": "Recommend us?", "required": True,
                 "options": ["Yes", "No"], "hasCorrectAnswer": False},
                {"id": "satisfaction", "type": "slider", "label": "Satisfaction", "required": False,
                 "min": 0, "max": 10, "hasCorrectAnswer": True, "correctAnswer": "8"},
                {"id": "comments", "type": "multi-text", "label": "Comments", "required": False,
                 "textboxCount": 2},
                {"id": "attachments", "type": "file", "label": "Attachments", "required": False,
                 "multiple": True},
            ],
        },
    ],
}


class RecordingNotifier:
    def __init__(self):
        self.calls = []

    def send(self, recipients, title, body, form_id=None):
        self.calls.append({
            "recipients": list(recipients),
            "title": title,
            "body": body,
            "form_id": form_id,
        })
        return {"success": True, "sent": len(recipients)}


@pytest.fixture
def sample_config():
    return copy.deepcopy(SAMPLE_CONFIG)


@pytest.fixture
def sample_schema(sample_config):
    return FormSchema.model_validate(sample_config)


@pytest.fixture
def db_session():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(db_session, notifier, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "REPORTS_DIR", str(tmp_path))
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_notifier] = lambda: notifier
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
