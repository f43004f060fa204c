import logging
from typing import Callable, Optional

from securepass.core.errors import SessionError
from .identity import Identity, IdentityProvider, IdentityState

logger = logging.getLogger(__name__)

SessionListener = Callable[[IdentityState, IdentityState], None]


class VaultSession:
    """
    Current owner identity, passed explicitly to every component that touches the store.

    Opened once at application start and closed on shutdown. Listeners get
    ``(new_state, previous_state)`` whenever the identity provider pushes a change.
    """

    def __init__(self, provider: IdentityProvider):
        self.provider = provider
        self._state = IdentityState.loading()
        self._listeners: list[SessionListener] = []
        self._unsubscribe: Optional[Callable[[], None]] = None

    def open(self) -> "VaultSession":
        if self._unsubscribe is None:
            self._unsubscribe = self.provider.subscribe(self._on_identity)
        return self

    def close(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        previous, self._state = self._state, IdentityState.absent()
        self._emit(previous)
        self._listeners.clear()

    def __enter__(self) -> "VaultSession":
        return self.open()

    def __exit__(self, *exc):
        self.close()

    @property
    def state(self) -> IdentityState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def is_absent(self) -> bool:
        return self._state.is_absent

    @property
    def identity(self) -> Optional[Identity]:
        return self._state.identity

    @property
    def owner_id(self) -> Optional[str]:
        return self._state.identity.uid if self._state.identity else None

    def require_owner(self) -> str:
        if self._state.is_loading:
            raise SessionError("Session is still loading")
        if self._state.identity is None:
            raise SessionError("Not signed in")
        return self._state.identity.uid

    def add_listener(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _on_identity(self, state: IdentityState):
        if state == self._state:
            return
        previous, self._state = self._state, state
        logger.debug("Session %s -> %s", previous.status.value, state.status.value)
        self._emit(previous)

    def _emit(self, previous: IdentityState):
        if previous == self._state:
            return
        # one failing listener must not keep the others from hearing the change
        for listener in list(self._listeners):
            try:
                listener(self._state, previous)
            except Exception:
                logger.exception("Session listener %r failed", listener)
