from dataclasses import dataclass

from securepass.core.models import RecordKind
from .config import ClientSettings
from .dashboard import DashboardLoader
from .identity import RemoteIdentityProvider
from .manager import RecordManager
from .session import VaultSession
from .session_cache import SessionCache
from .store import LocalRecordStore, RecordStore, RemoteRecordStore

RECORD_ROUTES = {
    "/api-keys": RecordKind.API_KEY,
    "/passwords": RecordKind.PASSWORD,
    "/notes": RecordKind.NOTE,
}


@dataclass
class AppContext:
    """Everything a view needs, created once per application run."""
    settings: ClientSettings
    provider: RemoteIdentityProvider
    session: VaultSession
    store: RecordStore
    managers: dict[RecordKind, RecordManager]
    dashboard: DashboardLoader

    @classmethod
    def create(cls, settings: ClientSettings) -> "AppContext":
        provider = RemoteIdentityProvider(settings.SERVER_URL, SessionCache(), settings.REQUEST_TIMEOUT)
        session = VaultSession(provider)
        store: RecordStore
        if settings.LOCAL_DB:
            store = LocalRecordStore(settings.LOCAL_DB)
        else:
            store = RemoteRecordStore(settings.SERVER_URL, lambda: provider.token, timeout=settings.REQUEST_TIMEOUT)
        managers = {
            kind: RecordManager(session, store, kind, settings.DEFAULT_PAGE_SIZE)
            for kind in RecordKind
        }
        return cls(settings, provider, session, store, managers, DashboardLoader(session, store))

    def close(self):
        for manager in self.managers.values():
            manager.close()
        self.dashboard.close()
        self.session.close()
