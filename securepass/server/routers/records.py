# Per-owner document collections: owners/{owner_id}/{apiKeys|passwords|notes}
import json
import logging
import time
from typing import Any, Dict, List
from uuid import uuid4
from fastapi import APIRouter, Body, Depends, HTTPException, Response, status
from sqlmodel import Session, select
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from securepass.core.models import RecordKind, VaultRecord, record_from_document
from ..database import get_session
from ..models import StoredRecord, User
from .auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


class CreatedResponse(BaseModel):
    id: str


def _resolve_kind(collection: str) -> RecordKind:
    try:
        return RecordKind.from_collection(collection)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown collection: {collection}")


def _check_owner(owner_id: str, user: User):
    if owner_id != user.uid:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to access this vault")


def _validate(kind: RecordKind, record_id: str, document: Dict[str, Any]) -> VaultRecord:
    try:
        return record_from_document(kind, record_id, document)
    except PydanticValidationError as exc:
        detail = [
            {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
            for err in exc.errors()
        ]
        raise HTTPException(status_code=422, detail=detail)


def _get_owned(session: Session, user: User, kind: RecordKind, record_id: str) -> StoredRecord:
    statement = select(StoredRecord).where(
        StoredRecord.id == record_id,
        StoredRecord.owner_id == user.id,
        StoredRecord.kind == kind.value,
    )
    row = session.exec(statement).first()
    if row is None:
        raise HTTPException(status_code=404, detail="Record not found")
    return row


@router.get("/owners/{owner_id}/{collection}", response_model=List[Dict[str, Any]])
def list_records(owner_id: str, collection: str,
                 session: Session = Depends(get_session),
                 current_user: User = Depends(get_current_user)):
    kind = _resolve_kind(collection)
    _check_owner(owner_id, current_user)

    statement = select(StoredRecord).where(
        StoredRecord.owner_id == current_user.id,
        StoredRecord.kind == kind.value,
    ).order_by(StoredRecord.seq)  # type: ignore[arg-type]
    rows = session.exec(statement).all()
    logger.debug("Listing %d %s for %s", len(rows), collection, owner_id)
    return [{**json.loads(row.document), "id": row.id} for row in rows]


@router.post("/owners/{owner_id}/{collection}", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def create_record(owner_id: str, collection: str,
                  document: Dict[str, Any] = Body(...),
                  session: Session = Depends(get_session),
                  current_user: User = Depends(get_current_user)):
    kind = _resolve_kind(collection)
    _check_owner(owner_id, current_user)

    record_id = uuid4().hex
    record = _validate(kind, record_id, document)
    row = StoredRecord(
        id=record_id,
        kind=kind.value,
        document=json.dumps(record.to_document()),
        owner_id=current_user.id,  # type: ignore[arg-type]
    )
    session.add(row)
    session.commit()
    logger.info("Created %s %s for %s", kind.value, record_id, owner_id)
    return {"id": record_id}


@router.put("/owners/{owner_id}/{collection}/{record_id}", response_model=CreatedResponse)
def update_record(owner_id: str, collection: str, record_id: str,
                  document: Dict[str, Any] = Body(...),
                  session: Session = Depends(get_session),
                  current_user: User = Depends(get_current_user)):
    kind = _resolve_kind(collection)
    _check_owner(owner_id, current_user)

    row = _get_owned(session, current_user, kind, record_id)
    record = _validate(kind, record_id, document)
    row.document = json.dumps(record.to_document())
    row.updated_at = time.time()
    session.add(row)
    session.commit()
    logger.info("Updated %s %s for %s", kind.value, record_id, owner_id)
    return {"id": record_id}


@router.delete("/owners/{owner_id}/{collection}/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_record(owner_id: str, collection: str, record_id: str,
                  session: Session = Depends(get_session),
                  current_user: User = Depends(get_current_user)):
    kind = _resolve_kind(collection)
    _check_owner(owner_id, current_user)

    row = _get_owned(session, current_user, kind, record_id)
    session.delete(row)
    session.commit()
    logger.info("Deleted %s %s for %s", kind.value, record_id, owner_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
