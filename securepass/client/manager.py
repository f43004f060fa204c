"""
Per-kind record managers.

A manager is where user actions meet the store: it validates forms, runs the
store call, re-lists the collection after every successful mutation, and turns
every failure into a :class:`Notice` instead of letting it escape to the view.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from securepass.core.errors import SessionError, StoreError, ValidationError
from securepass.core.index import ALL_CATEGORIES, RecordIndex
from securepass.core.models import RecordKind, VaultRecord
from securepass.core.pagination import DEFAULT_PAGE_SIZE, PaginationView
from securepass.core.validator import validate_form
from securepass.core.visibility import VisibilityState, reveal_secret
from .identity import IdentityState
from .session import VaultSession
from .store import RecordStore

logger = logging.getLogger(__name__)


class NoticeLevel(str, Enum):
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    level: NoticeLevel
    title: str
    message: str


class RecordManager:
    def __init__(self, session: VaultSession, store: RecordStore, kind: RecordKind,
                 page_size: int = DEFAULT_PAGE_SIZE):
        self.session = session
        self.store = store
        self.kind = kind

        self.records: list[VaultRecord] = []
        self.loading = False
        self.query = ""
        self.category = ALL_CATEGORIES
        self.form_errors: dict[str, list[str]] = {}
        self.pagination: PaginationView[VaultRecord] = PaginationView(page_size)
        self.visibility = VisibilityState()
        self.notices: list[Notice] = []

        # bumped on every list issued and on every identity change;
        # only the newest list response is applied
        self._generation = 0
        self._owner_id = session.owner_id
        self._tasks: set[asyncio.Task] = set()
        self._listeners: list[Callable[[], None]] = []
        self._remove_session_listener = session.add_listener(self._on_session_change)
        self._index = RecordIndex(self.records)

    # --- change notification ---

    def add_listener(self, listener: Callable[[], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _changed(self):
        for listener in list(self._listeners):
            listener()

    def _notify(self, level: NoticeLevel, title: str, message: str):
        self.notices.append(Notice(level, title, message))
        self._changed()

    def take_notices(self) -> list[Notice]:
        notices, self.notices = self.notices, []
        return notices

    # --- derived views ---

    def _rederive(self, reset_page: bool):
        self._index = RecordIndex(self.records, self.query, self.category)
        self.pagination.update(self._index.visible, reset=reset_page)
        self._changed()

    @property
    def filtered(self) -> list[VaultRecord]:
        return self._index.visible

    @property
    def page(self) -> list[VaultRecord]:
        return self.pagination.items

    @property
    def platforms(self) -> list[str]:
        return self._index.platforms if self.kind is RecordKind.PASSWORD else []

    def find(self, record_id: str) -> Optional[VaultRecord]:
        for record in self.records:
            if record.id == record_id:
                return record
        return None

    def set_query(self, query: str):
        self.query = query or ""
        self._rederive(reset_page=True)

    def set_category(self, category: str):
        if self.kind is not RecordKind.PASSWORD and category != ALL_CATEGORIES:
            raise ValueError("Category filtering applies to passwords only")
        self.category = category or ALL_CATEGORIES
        self._rederive(reset_page=True)

    def set_page_size(self, page_size: int):
        self.pagination.set_page_size(page_size)
        self._changed()

    def next_page(self) -> int:
        page = self.pagination.next()
        self._changed()
        return page

    def previous_page(self) -> int:
        page = self.pagination.previous()
        self._changed()
        return page

    def go_to_page(self, page: int) -> int:
        page = self.pagination.go_to(page)
        self._changed()
        return page

    # --- secrets ---

    def toggle_visibility(self, record_id: str) -> bool:
        visible = self.visibility.toggle(record_id)
        self._changed()
        return visible

    def display_secret(self, record: VaultRecord) -> str:
        return self.visibility.render(record)

    def copy_secret(self, record: VaultRecord) -> str:
        secret = reveal_secret(record)
        self._notify(NoticeLevel.INFO, "Copied", f"{self.kind.singular} copied to clipboard.")
        return secret

    # --- store round-trips ---

    def _discard(self):
        self._generation += 1
        self.records = []
        self.loading = False
        self.form_errors = {}
        self.visibility.clear()
        self._rederive(reset_page=True)

    async def refresh(self) -> bool:
        """Re-list the collection; True when the listing was applied."""
        try:
            owner_id = self.session.require_owner()
        except SessionError:
            # loading or signed out: access is suspended
            return False

        self._generation += 1
        generation = self._generation
        self.loading = True
        self._changed()
        try:
            records = await self.store.list(owner_id, self.kind)
        except StoreError as e:
            if generation == self._generation:
                self.loading = False
                logger.warning("Listing %s failed: %s", self.kind.collection, e)
                self._notify(NoticeLevel.ERROR, "Error", f"Failed to fetch {self.kind.label.lower()}.")
            return False

        if generation != self._generation or owner_id != self.session.owner_id:
            logger.debug("Discarding stale %s listing (generation %d)", self.kind.collection, generation)
            return False

        self._owner_id = owner_id
        self.records = list(records)
        self.loading = False
        self.visibility.clear()
        self._rederive(reset_page=False)
        return True

    async def submit(self, form: Mapping[str, Any], editing_id: Optional[str] = None) -> bool:
        """Add (``editing_id`` is None) or fully replace a record from form input."""
        try:
            owner_id = self.session.require_owner()
        except SessionError as e:
            self._notify(NoticeLevel.ERROR, "Error", str(e))
            return False

        try:
            payload = validate_form(self.kind, form)
        except ValidationError as e:
            self.form_errors = e.errors
            self._changed()
            return False
        self.form_errors = {}

        label = self.kind.singular
        try:
            if editing_id:
                await self.store.update(owner_id, self.kind, editing_id, payload)
            else:
                record_id = await self.store.create(owner_id, self.kind, payload)
                logger.info("Added %s %s", self.kind.value, record_id)
        except StoreError as e:
            logger.warning("Saving %s failed: %s", self.kind.value, e)
            self._notify(NoticeLevel.ERROR, "Error", f"Failed to save {label.lower()}.")
            return False

        verb = "updated" if editing_id else "added"
        self._notify(NoticeLevel.INFO, "Success", f"{label} {verb} successfully.")
        await self.refresh()
        return True

    async def delete(self, record_id: str) -> bool:
        try:
            owner_id = self.session.require_owner()
        except SessionError as e:
            self._notify(NoticeLevel.ERROR, "Error", str(e))
            return False

        try:
            await self.store.delete(owner_id, self.kind, record_id)
        except StoreError as e:
            logger.warning("Deleting %s %s failed: %s", self.kind.value, record_id, e)
            self._notify(NoticeLevel.ERROR, "Error", f"Failed to delete {self.kind.singular.lower()}.")
            return False

        logger.info("Deleted %s %s", self.kind.value, record_id)
        self._notify(NoticeLevel.INFO, "Success", f"{self.kind.singular} deleted.")
        await self.refresh()
        return True

    # --- session ---

    def _on_session_change(self, state: IdentityState, previous: IdentityState):
        owner_id = state.identity.uid if state.identity else None
        if owner_id == self._owner_id and self.records:
            return
        self._owner_id = owner_id
        self._discard()
        if owner_id is not None:
            self._schedule_refresh()

    def _schedule_refresh(self):
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # no loop yet: the view refreshes when it opens
            return
        task = loop.create_task(self.refresh())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def settle(self):
        """Wait for refreshes scheduled by session changes."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def close(self):
        self._remove_session_listener()
        self._discard()
        self._listeners.clear()
