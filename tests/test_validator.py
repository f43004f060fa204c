"""Tests for securepass.core.validator: add/edit form validation (pure unit tests)."""

import pytest

from securepass.core.errors import ValidationError
from securepass.core.models import ApiKeyRecord, CustomField, NoteRecord, RecordKind
from securepass.core.validator import (
    STATUS_MESSAGE,
    empty_form,
    form_from_record,
    parse_tags,
    validate_form,
)


class TestParseTags:
    def test_empty(self):
        assert parse_tags("") == []
        assert parse_tags(None) == []

    def test_split_trim_drop_empty(self):
        assert parse_tags(" ai, prod,, , ops ") == ["ai", "prod", "ops"]

    def test_lowercased_and_deduplicated(self):
        assert parse_tags("Prod, prod, AI, ai") == ["prod", "ai"]

    def test_single_tag(self):
        assert parse_tags("work") == ["work"]


class TestValidateApiKey:
    def test_valid_form(self):
        document = validate_form(RecordKind.API_KEY, {
            "modelName": "Gemini",
            "secretValue": "sk-123",
            "status": "Active",
            "tags": "ai, prod",
        })
        assert document == {
            "modelName": "Gemini",
            "secretValue": "sk-123",
            "status": "Active",
            "tags": ["ai", "prod"],
            "customFields": [],
        }

    def test_status_defaults_to_active(self):
        document = validate_form(RecordKind.API_KEY, {"modelName": "Gemini", "secretValue": "sk-123"})
        assert document["status"] == "Active"

    def test_missing_required_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_form(RecordKind.API_KEY, {})
        errors = exc_info.value.errors
        assert errors["modelName"] == ["Model name is required"]
        assert errors["secretValue"] == ["API key is required"]

    def test_whitespace_only_is_empty(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_form(RecordKind.API_KEY, {"modelName": "   ", "secretValue": "sk-1"})
        assert exc_info.value.first("modelName") == "Model name is required"
        assert "secretValue" not in exc_info.value.errors

    def test_secret_kept_verbatim(self):
        document = validate_form(RecordKind.API_KEY, {"modelName": "Gemini", "secretValue": " sk-1 "})
        assert document["secretValue"] == " sk-1 "

    def test_invalid_status(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_form(RecordKind.API_KEY, {"modelName": "Gemini", "secretValue": "sk", "status": "Paused"})
        assert exc_info.value.errors["status"] == [STATUS_MESSAGE]

    def test_snake_case_keys_accepted(self):
        document = validate_form(RecordKind.API_KEY, {"model_name": "Gemini", "secret_value": "sk"})
        assert document["modelName"] == "Gemini"
        assert document["secretValue"] == "sk"


class TestValidatePassword:
    def test_required_messages(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_form(RecordKind.PASSWORD, {"status": "Inactive"})
        errors = exc_info.value.errors
        assert errors["appName"] == ["App/Platform name is required"]
        assert errors["username"] == ["Username/Email is required"]
        assert errors["secretValue"] == ["Password is required"]

    def test_valid(self):
        document = validate_form(RecordKind.PASSWORD, {
            "appName": "GitHub", "username": "alice", "secretValue": "pw", "status": "Inactive",
        })
        assert document["appName"] == "GitHub"
        assert document["status"] == "Inactive"


class TestValidateNote:
    def test_valid_note_has_no_status(self):
        document = validate_form(RecordKind.NOTE, {"title": "Wifi", "content": "code 1234", "status": "Active"})
        assert document == {"title": "Wifi", "content": "code 1234", "tags": [], "customFields": []}

    def test_required(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_form(RecordKind.NOTE, {"title": "", "content": ""})
        assert exc_info.value.errors == {
            "title": ["Title is required"],
            "content": ["Content is required"],
        }


class TestCustomFields:
    def test_empty_sequence_is_valid(self):
        document = validate_form(RecordKind.NOTE, {"title": "t", "content": "c", "customFields": []})
        assert document["customFields"] == []

    def test_order_preserved(self):
        fields = [{"label": "b", "value": "2"}, {"label": "a", "value": "1"}]
        document = validate_form(RecordKind.NOTE, {"title": "t", "content": "c", "customFields": fields})
        assert document["customFields"] == fields

    def test_each_pair_needs_label_and_value(self):
        fields = [{"label": "ok", "value": "1"}, {"label": "", "value": "2"}, {"label": "x", "value": " "}]
        with pytest.raises(ValidationError) as exc_info:
            validate_form(RecordKind.NOTE, {"title": "t", "content": "c", "customFields": fields})
        errors = exc_info.value.errors
        assert errors["customFields.1.label"] == ["Label is required"]
        assert errors["customFields.2.value"] == ["Value is required"]
        assert "customFields.0.label" not in errors


class TestFormHelpers:
    def test_form_from_record_round_trips(self):
        record = ApiKeyRecord(
            id="k1", model_name="Gemini", secret_value="sk-123", tags=["ai", "prod"],
            custom_fields=[CustomField(label="limit", value="1000/day")],
        )
        form = form_from_record(record)
        assert form["tags"] == "ai, prod"
        assert "id" not in form
        assert validate_form(RecordKind.API_KEY, form) == record.to_document()

    def test_note_form_from_record(self):
        record = NoteRecord(id="n1", title="Wifi", content="code")
        assert form_from_record(record)["title"] == "Wifi"

    def test_empty_form_shapes(self):
        assert empty_form(RecordKind.API_KEY) == {
            "modelName": "", "secretValue": "", "status": "Active", "tags": "", "customFields": [],
        }
        assert "status" not in empty_form(RecordKind.NOTE)

    def test_empty_form_fails_validation(self):
        with pytest.raises(ValidationError):
            validate_form(RecordKind.PASSWORD, empty_form(RecordKind.PASSWORD))
