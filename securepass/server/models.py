import time
from typing import ClassVar, List, Optional
from datetime import datetime, timezone
from uuid import uuid4
from sqlmodel import SQLModel, Field, Relationship


class User(SQLModel, table=True):
    __tablename__: ClassVar[str] = "users"
    id: Optional[int] = Field(default=None, primary_key=True)
    # owner id exposed to clients, used in owners/{uid}/... paths
    uid: str = Field(default_factory=lambda: uuid4().hex, index=True, unique=True)
    email: str = Field(index=True, unique=True)
    hashed_password: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    records: List["StoredRecord"] = Relationship(back_populates="owner", sa_relationship_kwargs={"cascade": "all, delete"})


class StoredRecord(SQLModel, table=True):
    """One document of one owner's apiKeys/passwords/notes collection."""
    __tablename__: ClassVar[str] = "vault_records"
    # insertion order, used to list in creation order
    seq: Optional[int] = Field(default=None, primary_key=True)
    id: str = Field(default_factory=lambda: uuid4().hex, index=True, unique=True)
    kind: str = Field(index=True)
    document: str
    created_at: float = Field(default_factory=time.time)
    updated_at: float = Field(default_factory=time.time)
    owner_id: int = Field(foreign_key="users.id", index=True)
    owner: Optional[User] = Relationship(back_populates="records")
