import pytest

from app.engine import editor
from app.schemas.form import FormSchema


def test_new_form_has_one_page_with_a_text_field():
    schema = editor.new_form_schema()
    assert schema.form_title == "Form Title"
    assert len(schema.pages) == 1
    assert schema.pages[0].title == "Page 1"
    assert schema.pages[0].fields[0].type == "text"


def test_removing_last_page_inserts_fresh_page():
    schema = editor.new_form_schema()
    updated = editor.remove_page(schema, 0)

    assert len(updated.pages) == 1
    assert updated.pages[0].title == "New Page"
    assert updated.pages[0].fields == []
    assert updated.pages[0].id != schema.pages[0].id


def test_edits_do_not_touch_the_input(sample_schema):
    before = sample_schema.model_dump()
    editor.remove_page(sample_schema, 1)
    editor.add_field(sample_schema, 0, "radio")
    editor.change_field_type(sample_schema, "name", "slider")
    assert sample_schema.model_dump() == before


def test_add_page_numbers_title(sample_schema):
    updated = editor.add_page(sample_schema)
    assert updated.pages[-1].title == "Page 3"
    assert updated.pages[-1].id.startswith("page_")


def test_remove_page_out_of_range(sample_schema):
    with pytest.raises(IndexError):
        editor.remove_page(sample_schema, 5)


@pytest.mark.parametrize("field_type,attrs", [
    ("radio", {"options": ["Option 1", "Option 2"]}),
    ("boolean", {"options": ["Yes", "No"]}),
    ("slider", {"min": 0, "max": 100}),
    ("multi-text", {"textbox_count": 2}),
    ("file", {"multiple": False}),
])
def test_add_field_uses_registry_defaults(sample_schema, field_type, attrs):
    updated = editor.add_field(sample_schema, 0, field_type)
    added = updated.pages[0].fields[-1]
    assert added.type == field_type
    assert added.id.startswith("field_")
    assert added.required is False
    for key, value in attrs.items():
        assert getattr(added, key) == value


def test_add_field_correct_answer_default():
    schema = editor.new_form_schema()
    assert editor.add_field(schema, 0, "radio").pages[0].fields[-1].has_correct_answer
    assert not editor.add_field(schema, 0, "image").pages[0].fields[-1].has_correct_answer


def test_remove_field(sample_schema):
    updated = editor.remove_field(sample_schema, 0, "gender")
    assert [f.id for f in updated.pages[0].fields] == ["name", "interests"]


def test_change_type_keeps_options_and_resets_others(sample_schema):
    updated = editor.change_field_type(sample_schema, "gender", "checkbox")
    changed = updated.find_field("gender")
    assert changed.type == "checkbox"
    assert changed.label == "Checkbox Field"
    assert changed.options == ["Male", "Female"]
    assert changed.correct_answer == "Female"

    as_slider = editor.change_field_type(updated, "gender", "slider").find_field("gender")
    assert as_slider.options == []
    assert (as_slider.min, as_slider.max) == (0, 100)

    as_file = editor.change_field_type(updated, "gender", "file").find_field("gender")
    assert as_file.has_correct_answer is False
    assert as_file.correct_answer == ""
    assert as_file.multiple is False


def test_change_to_boolean_forces_yes_no(sample_schema):
    changed = editor.change_field_type(sample_schema, "gender", "boolean").find_field("gender")
    assert changed.options == ["Yes", "No"]


def test_correct_answer_flag(sample_schema):
    off = editor.set_correct_answer_flag(sample_schema, "name", False)
    assert off.find_field("name").has_correct_answer is False
    assert off.find_field("name").correct_answer == ""

    on = editor.set_correct_answer_flag(sample_schema, "recommend", True)
    assert on.find_field("recommend").has_correct_answer is True


def test_update_page_and_field(sample_schema):
    updated = editor.update_page(sample_schema, 1, title="Your Feedback")
    updated = editor.update_field(updated, "name", required=False, label="Full name")
    assert updated.pages[1].title == "Your Feedback"
    assert updated.find_field("name").label == "Full name"
    assert updated.find_field("name").required is False


def test_edited_schema_serializes_with_camel_case(sample_schema):
    doc = editor.add_field(sample_schema, 1, "multi-text").to_document()
    new_field = doc["pages"][1]["fields"][-1]
    assert new_field["textboxCount"] == 2
    assert "hasCorrectAnswer" in new_field
    assert FormSchema.model_validate(doc).pages[1].fields[-1].textbox_count == 2
