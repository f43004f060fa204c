import asyncio
import logging
from typing import Optional

from securepass.core.aggregator import VaultSummary, summarize
from securepass.core.errors import SessionError, StoreError
from securepass.core.models import RecordKind
from .identity import IdentityState
from .manager import Notice, NoticeLevel
from .session import VaultSession
from .store import RecordStore

logger = logging.getLogger(__name__)


class DashboardLoader:
    """Loads all three collections and summarizes them, independent of any manager's filters.

    The summary belongs to one owner: any identity change drops it and
    invalidates a load still in flight.
    """

    def __init__(self, session: VaultSession, store: RecordStore):
        self.session = session
        self.store = store
        self.summary: Optional[VaultSummary] = None
        self.loading = False
        self.notices: list[Notice] = []
        self._generation = 0
        self._owner_id = session.owner_id
        self._remove_session_listener = session.add_listener(self._on_session_change)

    async def load(self) -> Optional[VaultSummary]:
        try:
            owner_id = self.session.require_owner()
        except SessionError:
            return None

        self._generation += 1
        generation = self._generation
        self.loading = True
        try:
            api_keys, passwords, notes = await asyncio.gather(
                self.store.list(owner_id, RecordKind.API_KEY),
                self.store.list(owner_id, RecordKind.PASSWORD),
                self.store.list(owner_id, RecordKind.NOTE),
            )
        except StoreError as e:
            logger.warning("Dashboard load failed: %s", e)
            if generation == self._generation:
                self.loading = False
                self.notices.append(Notice(NoticeLevel.ERROR, "Error", "Failed to load dashboard data."))
            return self.summary

        if generation != self._generation or owner_id != self.session.owner_id:
            return self.summary

        self._owner_id = owner_id
        self.summary = summarize(api_keys, passwords, notes)  # type: ignore[arg-type]
        self.loading = False
        logger.debug("Dashboard: %d records", self.summary.total)
        return self.summary

    def reset(self):
        self._generation += 1
        self.summary = None
        self.loading = False

    def _on_session_change(self, state: IdentityState, previous: IdentityState):
        owner_id = state.identity.uid if state.identity else None
        if owner_id != self._owner_id:
            self._owner_id = owner_id
            self.reset()

    def close(self):
        self._remove_session_listener()
        self.reset()
        self.notices.clear()
