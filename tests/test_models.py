import pytest
from pydantic import ValidationError as PydanticValidationError

from securepass.core.models import (
    ApiKeyRecord,
    NoteRecord,
    PasswordRecord,
    RecordKind,
    Status,
    record_from_document,
)


class TestRecordKind:
    def test_collections(self):
        assert [k.collection for k in RecordKind] == ["apiKeys", "passwords", "notes"]
        assert RecordKind.from_collection("passwords") is RecordKind.PASSWORD

    def test_unknown_collection(self):
        with pytest.raises(ValueError):
            RecordKind.from_collection("cards")

    def test_only_notes_lack_a_secret(self):
        assert RecordKind.API_KEY.has_secret
        assert RecordKind.PASSWORD.has_secret
        assert not RecordKind.NOTE.has_secret


class TestRecordFromDocument:
    def test_camel_case_document(self):
        record = record_from_document(RecordKind.PASSWORD, "p1", {
            "appName": "GitHub", "username": "alice", "secretValue": "pw",
            "status": "Inactive", "tags": ["work"],
            "customFields": [{"label": "2fa", "value": "totp"}],
        })
        assert isinstance(record, PasswordRecord)
        assert record.id == "p1"
        assert record.status is Status.INACTIVE
        assert record.custom_fields[0].label == "2fa"

    def test_document_id_is_ignored(self):
        record = record_from_document(RecordKind.NOTE, "real", {"id": "other", "title": "t", "content": "c"})
        assert record.id == "real"

    def test_null_collections_become_empty(self):
        record = record_from_document(RecordKind.NOTE, "n", {
            "title": "t", "content": "c", "tags": None, "customFields": None,
        })
        assert record.tags == []
        assert record.custom_fields == []

    def test_missing_required_field(self):
        with pytest.raises(PydanticValidationError):
            record_from_document(RecordKind.API_KEY, "k", {"secretValue": "sk"})


class TestVaultRecord:
    def test_to_document_uses_wire_names(self):
        record = ApiKeyRecord(id="k", model_name="Gemini", secret_value="sk", tags=["ai"])
        assert record.to_document() == {
            "modelName": "Gemini", "secretValue": "sk", "status": "Active",
            "tags": ["ai"], "customFields": [],
        }

    def test_display_name_and_search_values(self):
        note = NoteRecord(id="n", title="Wifi", content="code", tags=["home"])
        assert note.display_name == "Wifi"
        assert note.search_values() == ["Wifi", "code", "home"]
