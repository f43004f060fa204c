"""
Client side of the identity provider.

Subscribers are pushed an :class:`IdentityState` on every change (and the
current one as soon as they subscribe); nothing polls.
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, Optional
import requests
from pydantic import BaseModel, ConfigDict

from securepass.core.errors import AuthError
from .http import bearer, error_message
from .session_cache import CachedSession, SessionCache

logger = logging.getLogger(__name__)


class IdentityStatus(str, Enum):
    LOADING = "loading"
    SIGNED_IN = "signed_in"
    ABSENT = "absent"


class Identity(BaseModel):
    model_config = ConfigDict(frozen=True)

    uid: str
    email: str


class IdentityState(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: IdentityStatus
    identity: Optional[Identity] = None

    @classmethod
    def loading(cls) -> "IdentityState":
        return cls(status=IdentityStatus.LOADING)

    @classmethod
    def absent(cls) -> "IdentityState":
        return cls(status=IdentityStatus.ABSENT)

    @classmethod
    def signed_in(cls, identity: Identity) -> "IdentityState":
        return cls(status=IdentityStatus.SIGNED_IN, identity=identity)

    @property
    def is_loading(self) -> bool:
        return self.status is IdentityStatus.LOADING

    @property
    def is_absent(self) -> bool:
        return self.status is IdentityStatus.ABSENT


IdentityListener = Callable[[IdentityState], None]


class IdentityProvider:
    def __init__(self):
        self._state = IdentityState.loading()
        self._subscribers: list[IdentityListener] = []

    @property
    def state(self) -> IdentityState:
        return self._state

    def subscribe(self, callback: IdentityListener) -> Callable[[], None]:
        self._subscribers.append(callback)
        callback(self._state)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self, state: IdentityState):
        self._state = state
        logger.debug("Identity state -> %s", state.status.value)
        for callback in list(self._subscribers):
            callback(state)


class RemoteIdentityProvider(IdentityProvider):
    """Signs in against the SecurePass server and remembers the token between runs."""

    def __init__(self, server_url: str, cache: Optional[SessionCache] = None, timeout: float = 10.0):
        super().__init__()
        self.server_url = server_url.rstrip("/")
        self.cache = cache
        self.timeout = timeout
        self._token: Optional[str] = None

    @property
    def token(self) -> Optional[str]:
        return self._token

    # --- blocking HTTP, run in a worker thread ---

    def _request(self, method: str, path: str, token: Optional[str] = None, **kwargs) -> requests.Response:
        try:
            resp = requests.request(
                method, f"{self.server_url}{path}",
                headers=bearer(token), timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            logger.warning("Identity request %s %s failed: %s", method, path, e)
            raise AuthError("Could not reach the server. Please try again.") from e
        if not resp.ok:
            raise AuthError(error_message(resp))
        return resp

    def _fetch_identity(self, token: str) -> Identity:
        resp = self._request("GET", "/auth/me", token=token)
        try:
            return Identity.model_validate(resp.json())
        except ValueError as e:
            raise AuthError("Unexpected response from the server.") from e

    def _obtain_token(self, email: str, password: str) -> tuple[str, Identity]:
        resp = self._request("POST", "/auth/token", data={"username": email, "password": password})
        try:
            token = resp.json()["access_token"]
        except (ValueError, KeyError, TypeError) as e:
            raise AuthError("Unexpected response from the server.") from e
        return token, self._fetch_identity(token)

    # --- operations ---

    async def start(self) -> IdentityState:
        """Resolve the initial state: restore a remembered token if it is still accepted."""
        self._publish(IdentityState.loading())
        cached = self.cache.load() if self.cache else None
        if cached is None or cached.server_url != self.server_url:
            self._publish(IdentityState.absent())
            return self.state

        try:
            identity = await asyncio.to_thread(self._fetch_identity, cached.token)
        except AuthError as e:
            logger.info("Remembered session was not restored: %s", e.message)
            if self.cache:
                self.cache.clear()
            self._publish(IdentityState.absent())
        else:
            self._token = cached.token
            self._publish(IdentityState.signed_in(identity))
        return self.state

    async def sign_in(self, email: str, password: str) -> Identity:
        token, identity = await asyncio.to_thread(self._obtain_token, email, password)
        self._token = token
        if self.cache:
            self.cache.save(CachedSession(server_url=self.server_url, email=identity.email, token=token))
        logger.info("Signed in as %s", identity.uid)
        self._publish(IdentityState.signed_in(identity))
        return identity

    async def sign_up(self, email: str, password: str) -> Identity:
        await asyncio.to_thread(
            self._request, "POST", "/auth/register", json={"email": email, "password": password}
        )
        return await self.sign_in(email, password)

    async def request_password_reset(self, email: str) -> str:
        resp = await asyncio.to_thread(self._request, "POST", "/auth/password-reset", json={"email": email})
        try:
            return resp.json()["message"]
        except (ValueError, KeyError, TypeError):
            return "Password reset requested."

    async def confirm_password_reset(self, code: str, new_password: str) -> str:
        """Set a new password with the code from the reset request; does not sign in."""
        resp = await asyncio.to_thread(
            self._request, "POST", "/auth/password-reset/confirm",
            json={"token": code, "password": new_password},
        )
        try:
            return resp.json()["message"]
        except (ValueError, KeyError, TypeError):
            return "Password has been reset."

    def sign_out(self):
        self._token = None
        if self.cache:
            self.cache.clear()
        logger.info("Signed out")
        self._publish(IdentityState.absent())
