"""
Record stores: CRUD against one owner's collection of one record kind.

Both implementations are async; the blocking work (HTTP or SQLite) runs in a
worker thread so the UI loop stays responsive.
"""

import asyncio
import json
import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, ClassVar, Mapping, Optional
from uuid import uuid4
import requests
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, Field, Session, create_engine, select

from securepass.core.errors import NotFoundError, StoreError
from securepass.core.models import RecordKind, VaultRecord, record_from_document
from .http import bearer, error_message

logger = logging.getLogger(__name__)

Document = Mapping[str, Any]


class RecordStore(ABC):
    @abstractmethod
    async def list(self, owner_id: str, kind: RecordKind) -> list[VaultRecord]:
        """Every record of ``kind`` owned by ``owner_id``; empty when there are none."""

    @abstractmethod
    async def create(self, owner_id: str, kind: RecordKind, payload: Document) -> str:
        """Store a new record and return its store-assigned id."""

    @abstractmethod
    async def update(self, owner_id: str, kind: RecordKind, record_id: str, payload: Document) -> None:
        """Replace every mutable field; raises NotFoundError for an unknown id."""

    @abstractmethod
    async def delete(self, owner_id: str, kind: RecordKind, record_id: str) -> None:
        """Remove permanently; raises NotFoundError for an unknown id."""


def _to_records(kind: RecordKind, documents) -> list[VaultRecord]:
    try:
        return [record_from_document(kind, doc["id"], doc) for doc in documents]
    except (PydanticValidationError, KeyError, TypeError) as e:
        raise StoreError(f"Malformed {kind.collection} document: {e}") from e


class RemoteRecordStore(RecordStore):
    """The SecurePass server's ``owners/{owner_id}/{collection}`` endpoints."""

    def __init__(self, server_url: str, token: Callable[[], Optional[str]],
                 api_prefix: str = "/api/v1", timeout: float = 10.0):
        self.base_url = f"{server_url.rstrip('/')}{api_prefix}"
        self._token = token
        self.timeout = timeout

    def _url(self, owner_id: str, kind: RecordKind, record_id: Optional[str] = None) -> str:
        url = f"{self.base_url}/owners/{owner_id}/{kind.collection}"
        return f"{url}/{record_id}" if record_id else url

    def _request(self, method: str, url: str, record_id: Optional[str] = None, **kwargs) -> requests.Response:
        try:
            resp = requests.request(method, url, headers=bearer(self._token()), timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise StoreError(f"{method} {url} failed: {e}") from e
        if resp.status_code == 404 and record_id is not None:
            raise NotFoundError(record_id)
        if not resp.ok:
            raise StoreError(f"{method} {url} failed ({resp.status_code}): {error_message(resp)}")
        return resp

    def _list(self, owner_id: str, kind: RecordKind) -> list[VaultRecord]:
        resp = self._request("GET", self._url(owner_id, kind))
        try:
            documents = resp.json()
        except ValueError as e:
            raise StoreError(f"Malformed list response: {e}") from e
        return _to_records(kind, documents)

    def _create(self, owner_id: str, kind: RecordKind, payload: Document) -> str:
        resp = self._request("POST", self._url(owner_id, kind), json=dict(payload))
        try:
            return resp.json()["id"]
        except (ValueError, KeyError, TypeError) as e:
            raise StoreError(f"Malformed create response: {e}") from e

    async def list(self, owner_id: str, kind: RecordKind) -> list[VaultRecord]:
        records = await asyncio.to_thread(self._list, owner_id, kind)
        logger.debug("Listed %d %s", len(records), kind.collection)
        return records

    async def create(self, owner_id: str, kind: RecordKind, payload: Document) -> str:
        return await asyncio.to_thread(self._create, owner_id, kind, payload)

    async def update(self, owner_id: str, kind: RecordKind, record_id: str, payload: Document) -> None:
        await asyncio.to_thread(
            self._request, "PUT", self._url(owner_id, kind, record_id), record_id, json=dict(payload)
        )

    async def delete(self, owner_id: str, kind: RecordKind, record_id: str) -> None:
        await asyncio.to_thread(self._request, "DELETE", self._url(owner_id, kind, record_id), record_id)


# --- local SQLite store ---

class LocalRecord(SQLModel, table=True):
    __tablename__: ClassVar[str] = "local_records"
    __table_args__ = {"extend_existing": True}
    seq: Optional[int] = Field(default=None, primary_key=True)
    id: str = Field(index=True, unique=True)
    owner_id: str = Field(index=True)
    kind: str = Field(index=True)
    document: str
    updated_at: float = Field(default_factory=time.time)


class LocalRecordStore(RecordStore):
    """Same per-owner collections kept in a local SQLite file."""

    def __init__(self, db_filename: str | Path):
        self.db_filename = str(db_filename)
        db_path = Path(db_filename).as_posix()
        self.engine = create_engine(f"sqlite:///{db_path}", connect_args={"check_same_thread": False})
        SQLModel.metadata.create_all(self.engine, tables=[LocalRecord.__table__])  # type: ignore[attr-defined]
        logger.info("Local vault at %s", self.db_filename)

    def _owned(self, session: Session, owner_id: str, kind: RecordKind, record_id: str) -> LocalRecord:
        statement = select(LocalRecord).where(
            LocalRecord.id == record_id,
            LocalRecord.owner_id == owner_id,
            LocalRecord.kind == kind.value,
        )
        row = session.exec(statement).first()
        if row is None:
            raise NotFoundError(record_id)
        return row

    @staticmethod
    def _serialize(kind: RecordKind, record_id: str, payload: Document) -> str:
        # same validation the server applies to incoming documents
        try:
            record = record_from_document(kind, record_id, payload)
        except PydanticValidationError as e:
            raise StoreError(f"Rejected {kind.collection} document: {e}") from e
        return json.dumps(record.to_document())

    def _list(self, owner_id: str, kind: RecordKind) -> list[VaultRecord]:
        with Session(self.engine) as session:
            statement = select(LocalRecord).where(
                LocalRecord.owner_id == owner_id,
                LocalRecord.kind == kind.value,
            ).order_by(LocalRecord.seq)  # type: ignore[arg-type]
            rows = session.exec(statement).all()
            documents = [{**json.loads(row.document), "id": row.id} for row in rows]
        return _to_records(kind, documents)

    def _create(self, owner_id: str, kind: RecordKind, payload: Document) -> str:
        record_id = uuid4().hex
        document = self._serialize(kind, record_id, payload)
        with Session(self.engine) as session:
            session.add(LocalRecord(id=record_id, owner_id=owner_id, kind=kind.value, document=document))
            session.commit()
        return record_id

    def _update(self, owner_id: str, kind: RecordKind, record_id: str, payload: Document):
        document = self._serialize(kind, record_id, payload)
        with Session(self.engine) as session:
            row = self._owned(session, owner_id, kind, record_id)
            row.document = document
            row.updated_at = time.time()
            session.add(row)
            session.commit()

    def _delete(self, owner_id: str, kind: RecordKind, record_id: str):
        with Session(self.engine) as session:
            session.delete(self._owned(session, owner_id, kind, record_id))
            session.commit()

    async def _run(self, func, *args):
        try:
            return await asyncio.to_thread(func, *args)
        except SQLAlchemyError as e:
            raise StoreError(f"Local vault error: {e}") from e

    async def list(self, owner_id: str, kind: RecordKind) -> list[VaultRecord]:
        return await self._run(self._list, owner_id, kind)

    async def create(self, owner_id: str, kind: RecordKind, payload: Document) -> str:
        return await self._run(self._create, owner_id, kind, payload)

    async def update(self, owner_id: str, kind: RecordKind, record_id: str, payload: Document) -> None:
        await self._run(self._update, owner_id, kind, record_id, payload)

    async def delete(self, owner_id: str, kind: RecordKind, record_id: str) -> None:
        await self._run(self._delete, owner_id, kind, record_id)

    def dispose(self):
        self.engine.dispose()
