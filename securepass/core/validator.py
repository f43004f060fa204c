"""
Add/edit form validation.

Forms arrive as plain mappings keyed by wire names (``modelName``, ``secretValue``,
``customFields`` ...); snake_case keys are accepted too. A valid form becomes the
document that ``RecordStore.create``/``update`` expects. An invalid one raises
:class:`~securepass.core.errors.ValidationError` and nothing is sent to the store.
"""

from typing import Annotated, Any, ClassVar, Iterable, Mapping
from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .errors import ValidationError
from .models import RecordKind, Status, VaultRecord


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


# whitespace-only counts as empty; anything else is kept verbatim
Required = Annotated[str, AfterValidator(_not_blank)]

REQUIRED_MESSAGES = {
    "modelName": "Model name is required",
    "appName": "App/Platform name is required",
    "username": "Username/Email is required",
    "title": "Title is required",
    "content": "Content is required",
    "label": "Label is required",
    "value": "Value is required",
}

SECRET_MESSAGES = {
    RecordKind.API_KEY: "API key is required",
    RecordKind.PASSWORD: "Password is required",
}

STATUS_MESSAGE = "Status must be Active or Inactive"

_WIRE_NAMES = {
    "model_name": "modelName",
    "app_name": "appName",
    "secret_value": "secretValue",
    "custom_fields": "customFields",
}


class CustomFieldInput(BaseModel):
    model_config = ConfigDict(validate_default=True)

    label: Required = ""
    value: Required = ""


class RecordForm(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore", validate_default=True)

    kind: ClassVar[RecordKind]

    tags: str | None = ""
    custom_fields: list[CustomFieldInput] | None = Field(default_factory=list)


class ApiKeyForm(RecordForm):
    kind: ClassVar[RecordKind] = RecordKind.API_KEY

    model_name: Required = ""
    secret_value: Required = ""
    status: Status = Status.ACTIVE


class PasswordForm(RecordForm):
    kind: ClassVar[RecordKind] = RecordKind.PASSWORD

    app_name: Required = ""
    username: Required = ""
    secret_value: Required = ""
    status: Status = Status.ACTIVE


class NoteForm(RecordForm):
    kind: ClassVar[RecordKind] = RecordKind.NOTE

    title: Required = ""
    content: Required = ""


FORM_TYPES: dict[RecordKind, type[RecordForm]] = {
    RecordKind.API_KEY: ApiKeyForm,
    RecordKind.PASSWORD: PasswordForm,
    RecordKind.NOTE: NoteForm,
}


def parse_tags(text: str | None) -> list[str]:
    """Split comma-separated tag text: trimmed, lower-cased, no empties, first occurrence wins."""
    if not text:
        return []
    tags = (segment.strip().lower() for segment in text.split(","))
    return list(dict.fromkeys(tag for tag in tags if tag))


def format_tags(tags: Iterable[str]) -> str:
    return ", ".join(tags)


def _error_key(loc: tuple) -> str:
    return ".".join(_WIRE_NAMES.get(str(part), str(part)) for part in loc)


def _message(kind: RecordKind, loc: tuple, error: dict) -> str:
    field = _WIRE_NAMES.get(str(loc[-1]), str(loc[-1]))
    if field == "status":
        return STATUS_MESSAGE
    if field == "secretValue" and kind in SECRET_MESSAGES:
        return SECRET_MESSAGES[kind]
    if field in REQUIRED_MESSAGES and error["type"] in ("value_error", "missing", "string_type"):
        return REQUIRED_MESSAGES[field]
    return error["msg"]


def validate_form(kind: RecordKind, form: Mapping[str, Any]) -> dict[str, Any]:
    """Validate an add/edit form and return the document to store."""
    form_type = FORM_TYPES[kind]
    try:
        parsed = form_type.model_validate(dict(form))
    except PydanticValidationError as exc:
        errors: dict[str, list[str]] = {}
        for error in exc.errors():
            loc = tuple(error["loc"])
            errors.setdefault(_error_key(loc), []).append(_message(kind, loc, error))
        raise ValidationError(errors) from None

    document = parsed.model_dump(mode="json", by_alias=True, exclude={"tags", "custom_fields"})
    document["tags"] = parse_tags(parsed.tags)
    document["customFields"] = [field.model_dump() for field in parsed.custom_fields or []]
    return document


def form_from_record(record: VaultRecord) -> dict[str, Any]:
    """Edit form prefilled from an existing record."""
    form = record.to_document()
    form["tags"] = format_tags(record.tags)
    return form


def empty_form(kind: RecordKind) -> dict[str, Any]:
    form: dict[str, Any] = {_WIRE_NAMES.get(name, name): "" for name in FORM_TYPES[kind].model_fields}
    form["tags"] = ""
    form["customFields"] = []
    if kind.has_secret:
        form["status"] = Status.ACTIVE.value
    return form
