import pytest

from app.core.exceptions import SchemaStructureError
from app.engine.structure import check_publishable, check_structure, parse_schema_json


def test_valid_config_builds_schema(sample_config):
    schema = check_structure(sample_config)
    assert schema.form_title == "Customer Survey"
    assert len(schema.pages) == 2
    assert schema.find_field("interests").options == ["Technology", "Sports", "Music"]


@pytest.mark.parametrize("raw,message", [
    ({}, "Invalid JSON structure: pages array is required"),
    ({"pages": [{"title": "x", "fields": []}]}, "Page 1: id is required"),
    ({"pages": [{"id": "p", "fields": []}]}, "Page 1: title is required"),
    ({"pages": [{"id": "p", "title": "x"}]}, "Page 1: fields array is required"),
    ({"pages": [{"id": "p", "title": "x", "fields": [{"id": "f", "label": "L"}]}]},
     "Page 1, Field 1: type is required"),
    ({"pages": [{"id": "p", "title": "x", "fields": [{"id": "f", "type": "text"}]}]},
     "Page 1, Field 1: label is required"),
])
def test_structure_errors(raw, message):
    with pytest.raises(SchemaStructureError) as exc:
        check_structure(raw)
    assert str(exc.value) == message


def test_parse_schema_json_rejects_bad_json():
    with pytest.raises(SchemaStructureError):
        parse_schema_json("{pages: ")


def test_unknown_type_round_trips(sample_config):
    sample_config["pages"][0]["fields"][0]["type"] = "signature"
    schema = check_structure(sample_config)
    assert schema.to_document()["pages"][0]["fields"][0]["type"] == "signature"


def test_sample_is_publishable(sample_schema):
    assert check_publishable(sample_schema) == []


def test_publish_problems(sample_config):
    fields = sample_config["pages"][0]["fields"]
    fields[1]["options"] = []
    fields[2]["correctAnswer"] = ""
    fields.append({"id": "name", "type": "ranking", "label": "Order", "options": ["A"],
                   "hasCorrectAnswer": True, "correctAnswer": "not json"})

    problems = check_publishable(check_structure(sample_config))

    assert "About You / Gender: at least one option is required" in problems
    assert "About You / Interests: correct answer is missing" in problems
    assert "About You / Order: correct answer must be a JSON object of option rankings" in problems
    assert "Duplicate field id 'name'" in problems
