import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import inspect
from sqlalchemy.pool import StaticPool

from app import main
from app.db.session import build_engine

ADMIN = {"X-User-Id": "admin-1"}
USER = {"X-User-Id": "user-7"}

COMPLETE_ANSWERS = {
    "name": "Pavithra",
    "gender": "Female",
    "interests": ["Sports", "Technology"],
    "recommend": "yes",
    "satisfaction": 6,
    "attachments": [{"name": "cv.pdf", "size": 1200, "type": "application/pdf",
                     "lastModified": 1700000000000}],
}


def publish(client, config, headers=ADMIN, notify=True):
    return client.post("/api/v1/forms", json={"formConfig": config, "notify": notify}, headers=headers)


@pytest.fixture
def form_id(client, sample_config):
    response = publish(client, sample_config, notify=False)
    assert response.status_code == 201
    return response.json()["id"]


def test_health_check(client):
    assert client.get("/").json()["status"] == "ok"


def test_startup_creates_tables(monkeypatch):
    engine = build_engine("sqlite://", poolclass=StaticPool)
    monkeypatch.setattr(main, "engine", engine)

    with TestClient(main.app) as client:
        assert client.get("/").status_code == 200

    tables = set(inspect(engine).get_table_names())
    assert {"forms", "form_submissions", "notification_tokens"} <= tables
    engine.dispose()


def test_publish_notifies_registered_users(client, notifier, sample_config):
    token = client.post("/api/v1/notifications/tokens", json={"token": "tok-1"}, headers=USER)
    assert token.status_code == 201

    response = publish(client, sample_config)
    assert response.status_code == 201
    body = response.json()
    assert body["formTitle"] == "Customer Survey"
    assert body["published"] is True
    assert body["notified"] == 1

    assert notifier.calls[0]["recipients"] == ["tok-1"]
    assert notifier.calls[0]["title"] == "New Survey Available!"
    assert notifier.calls[0]["form_id"] == body["id"]


def test_token_registration_needs_identity(client):
    response = client.post("/api/v1/notifications/tokens", json={"token": "tok-1"})
    assert response.status_code == 401


def test_publish_rejects_malformed_schema(client):
    response = publish(client, {"formTitle": "Broken"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid JSON structure: pages array is required"


def test_publish_rejects_unpublishable_schema(client, sample_config):
    sample_config["pages"][0]["fields"][1]["options"] = []
    response = publish(client, sample_config)
    assert response.status_code == 400
    assert response.json()["detail"]["problems"] == [
        "About You / Gender: at least one option is required"
    ]


def test_get_and_list_forms(client, form_id):
    form = client.get(f"/api/v1/forms/{form_id}").json()
    assert form["formConfig"]["pages"][0]["fields"][2]["correctAnswer"] == "Technology, Sports"
    assert form["submissionCount"] == 0
    assert form["createdBy"] == "admin-1"

    forms = client.get("/api/v1/forms").json()
    assert [item["id"] for item in forms] == [form_id]


@pytest.mark.parametrize("bad_id", ["not-a-uuid", str(uuid.uuid4())])
def test_unknown_form_is_404(client, bad_id):
    assert client.get(f"/api/v1/forms/{bad_id}").status_code == 404
    assert client.get(f"/api/v1/forms/{bad_id}/analytics").status_code == 404


def test_validate_single_page(client, form_id):
    response = client.post(
        f"/api/v1/forms/{form_id}/validate",
        json={"answers": {"name": "  "}, "pageIndex": 0},
    )
    body = response.json()
    assert body["valid"] is False
    assert body["errors"] == {"name": "Name is required", "interests": "Interests is required"}
    assert body["pages"][0]["pageId"] == "page_1"


def test_validate_whole_form(client, form_id):
    body = client.post(f"/api/v1/forms/{form_id}/validate", json={"answers": COMPLETE_ANSWERS}).json()
    assert body == {"valid": True, "errors": {}, "pages": []}


def test_validate_page_out_of_range(client, form_id):
    response = client.post(f"/api/v1/forms/{form_id}/validate", json={"answers": {}, "pageIndex": 9})
    assert response.status_code == 400


def test_incomplete_submission_reports_every_page(client, form_id):
    response = client.post(
        f"/api/v1/forms/{form_id}/submissions",
        json={"answers": {"name": "Ann"}},
        headers=USER,
    )
    assert response.status_code == 422
    pages = response.json()["detail"]["pages"]
    assert [page["pageIndex"] for page in pages] == [0, 1]
    assert pages[0]["errors"] == {"interests": "Interests is required"}
    assert pages[1]["errors"] == {"recommend": "Recommend us? is required"}


def test_submit_scores_and_stores(client, form_id):
    response = client.post(
        f"/api/v1/forms/{form_id}/submissions",
        json={"answers": COMPLETE_ANSWERS, "submitterName": "Pavithra"},
        headers=USER,
    )
    assert response.status_code == 201
    body = response.json()
    assert body["submitterIdentity"] == "user-7"
    assert body["score"]["totalQuestions"] == 4
    assert body["score"]["correctCount"] == 3
    assert body["score"]["scorePercent"] == 75
    assert body["answers"]["attachments"][0]["name"] == "cv.pdf"

    stored = client.get(f"/api/v1/submissions/{body['id']}").json()
    assert stored["score"] == body["score"]

    listed = client.get(f"/api/v1/forms/{form_id}/submissions").json()
    assert [item["id"] for item in listed] == [body["id"]]


def test_submit_rejects_bad_file_metadata(client, form_id):
    answers = dict(COMPLETE_ANSWERS, attachments=["raw-bytes"])
    response = client.post(f"/api/v1/forms/{form_id}/submissions", json={"answers": answers})
    assert response.status_code == 400


def test_update_allowed_until_first_submission(client, form_id, sample_config):
    sample_config["formTitle"] = "Customer Survey v2"
    response = client.put(f"/api/v1/forms/{form_id}", json={"formConfig": sample_config})
    assert response.status_code == 200
    assert response.json()["version"] == 2
    assert response.json()["formTitle"] == "Customer Survey v2"

    client.post(f"/api/v1/forms/{form_id}/submissions", json={"answers": COMPLETE_ANSWERS})

    frozen = client.put(f"/api/v1/forms/{form_id}", json={"formConfig": sample_config})
    assert frozen.status_code == 409


def test_analytics(client, form_id):
    assert client.get(f"/api/v1/forms/{form_id}/analytics").json()["fields"] == []

    client.post(f"/api/v1/forms/{form_id}/submissions", json={"answers": COMPLETE_ANSWERS})
    second = dict(COMPLETE_ANSWERS, gender="Male", recommend="no", interests=["Music"])
    client.post(f"/api/v1/forms/{form_id}/submissions", json={"answers": second})

    body = client.get(f"/api/v1/forms/{form_id}/analytics").json()
    assert body["totalSubmissions"] == 2
    by_id = {item["field"]["id"]: item for item in body["fields"]}
    assert list(by_id) == ["gender", "interests", "recommend"]
    assert by_id["recommend"]["optionCounts"] == {"Yes": 1, "No": 1}
    assert by_id["interests"]["totalResponses"] == 2
    assert by_id["interests"]["chartData"][0] == {"name": "Sports", "count": 1, "percentage": 50}


def test_analytics_download(client, form_id):
    client.post(f"/api/v1/forms/{form_id}/submissions", json={"answers": COMPLETE_ANSWERS})
    response = client.get(f"/api/v1/forms/{form_id}/analytics?download=true")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument"
    )


def test_results_report(client, form_id):
    created = client.post(
        f"/api/v1/forms/{form_id}/submissions",
        json={"answers": COMPLETE_ANSWERS, "submitterName": "Pavithra"},
    ).json()

    report = client.get(f"/api/v1/submissions/{created['id']}/report").json()
    assert report["form_title"] == "Customer Survey"
    assert report["submitter"] == "Pavithra"
    assert report["scores"]["percentage"] == 75
    assert report["incorrect"] == ["Satisfaction"]

    download = client.get(f"/api/v1/submissions/{created['id']}/report?download=true")
    assert download.status_code == 200
    assert download.content[:2] == b"PK"


def test_unknown_submission_is_404(client):
    assert client.get(f"/api/v1/submissions/{uuid.uuid4()}").status_code == 404
