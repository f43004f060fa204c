from enum import Enum
from typing import Any, ClassVar, Mapping
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Status(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class RecordKind(str, Enum):
    API_KEY = "api_key"
    PASSWORD = "password"
    NOTE = "note"

    @property
    def collection(self) -> str:
        return _COLLECTIONS[self]

    @property
    def label(self) -> str:
        return _LABELS[self][0]

    @property
    def singular(self) -> str:
        return _LABELS[self][1]

    @property
    def search_fields(self) -> tuple[str, ...]:
        return _SEARCH_FIELDS[self]

    @property
    def has_secret(self) -> bool:
        return self is not RecordKind.NOTE

    @classmethod
    def from_collection(cls, collection: str) -> "RecordKind":
        for kind, name in _COLLECTIONS.items():
            if name == collection:
                return kind
        raise ValueError(f"Unknown collection: {collection}")


# owners/{ownerId}/<collection>
_COLLECTIONS = {
    RecordKind.API_KEY: "apiKeys",
    RecordKind.PASSWORD: "passwords",
    RecordKind.NOTE: "notes",
}

_LABELS = {
    RecordKind.API_KEY: ("API Keys", "API key"),
    RecordKind.PASSWORD: ("Passwords", "Password"),
    RecordKind.NOTE: ("Notes", "Note"),
}

_SEARCH_FIELDS = {
    RecordKind.API_KEY: ("model_name",),
    RecordKind.PASSWORD: ("app_name", "username"),
    RecordKind.NOTE: ("title", "content"),
}


class CustomField(BaseModel):
    label: str = Field(min_length=1)
    value: str = Field(min_length=1)


class VaultRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    kind: ClassVar[RecordKind]

    id: str
    tags: list[str] = Field(default_factory=list)
    custom_fields: list[CustomField] = Field(default_factory=list)

    @property
    def display_name(self) -> str:
        return getattr(self, self.kind.search_fields[0])

    def search_values(self) -> list[str]:
        return [getattr(self, name) for name in self.kind.search_fields] + list(self.tags)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude={"id"})


class ApiKeyRecord(VaultRecord):
    kind: ClassVar[RecordKind] = RecordKind.API_KEY

    model_name: str = Field(min_length=1)
    secret_value: str = Field(min_length=1)
    status: Status = Status.ACTIVE


class PasswordRecord(VaultRecord):
    kind: ClassVar[RecordKind] = RecordKind.PASSWORD

    app_name: str = Field(min_length=1)
    username: str = Field(min_length=1)
    secret_value: str = Field(min_length=1)
    status: Status = Status.ACTIVE


class NoteRecord(VaultRecord):
    kind: ClassVar[RecordKind] = RecordKind.NOTE

    title: str = Field(min_length=1)
    content: str = Field(min_length=1)


RECORD_TYPES: dict[RecordKind, type[VaultRecord]] = {
    RecordKind.API_KEY: ApiKeyRecord,
    RecordKind.PASSWORD: PasswordRecord,
    RecordKind.NOTE: NoteRecord,
}


def record_from_document(kind: RecordKind, record_id: str, document: Mapping[str, Any]) -> VaultRecord:
    """Build a typed record from a stored document; the document's own id, if any, is ignored."""
    data = {key: value for key, value in document.items() if key != "id"}
    # documents written by older clients may carry null here
    for key in ("tags", "customFields"):
        if data.get(key) is None:
            data[key] = []
    return RECORD_TYPES[kind].model_validate({**data, "id": record_id})
