"""RemoteIdentityProvider and the session cache, against the in-process server."""

import pytest

from securepass.client.identity import IdentityStatus, RemoteIdentityProvider
from securepass.client.session_cache import CachedSession, SessionCache
from securepass.core.errors import AuthError
from securepass.server.routers.auth import INVALID_RESET_TOKEN, RESET_DONE_MESSAGE, RESET_MESSAGE


@pytest.fixture
def cache(tmp_path):
    return SessionCache(tmp_path / "session.json")


@pytest.fixture
def identity(server, cache):
    return RemoteIdentityProvider(server, cache=cache)


class TestSessionCache:
    def test_missing_file(self, cache):
        assert cache.load() is None

    def test_save_load_clear(self, cache):
        cache.save(CachedSession(server_url="http://x", email="a@b.co", token="t"))
        assert cache.load().token == "t"
        assert (cache.path.stat().st_mode & 0o777) == 0o600
        cache.clear()
        assert cache.load() is None
        cache.clear()

    def test_corrupt_file_is_ignored(self, cache):
        cache.path.write_text("{not json", encoding="utf-8")
        assert cache.load() is None


@pytest.mark.asyncio
class TestRemoteIdentityProvider:
    async def test_start_without_cache_is_absent(self, identity):
        states = []
        identity.subscribe(lambda s: states.append(s.status))
        await identity.start()
        assert states == [IdentityStatus.LOADING, IdentityStatus.LOADING, IdentityStatus.ABSENT]

    async def test_sign_up_signs_in_and_remembers_token(self, identity, cache):
        user = await identity.sign_up("alice@example.com", "hunter22")
        assert user.email == "alice@example.com"
        assert identity.state.identity == user
        assert identity.token
        assert cache.load().token == identity.token

    async def test_restart_restores_session(self, server, identity, cache):
        user = await identity.sign_up("alice@example.com", "hunter22")
        restarted = RemoteIdentityProvider(server, cache=cache)
        state = await restarted.start()
        assert state.status is IdentityStatus.SIGNED_IN
        assert state.identity == user

    async def test_rejected_cached_token_is_dropped(self, server, cache):
        cache.save(CachedSession(server_url=server, email="a@b.co", token="expired"))
        provider = RemoteIdentityProvider(server, cache=cache)
        state = await provider.start()
        assert state.is_absent
        assert cache.load() is None

    async def test_wrong_password(self, identity):
        await identity.sign_up("alice@example.com", "hunter22")
        identity.sign_out()
        with pytest.raises(AuthError) as exc_info:
            await identity.sign_in("alice@example.com", "nope-nope")
        assert exc_info.value.message == "Incorrect email or password"
        assert identity.state.is_absent

    async def test_duplicate_sign_up(self, identity):
        await identity.sign_up("alice@example.com", "hunter22")
        with pytest.raises(AuthError, match="Email already registered"):
            await identity.sign_up("alice@example.com", "hunter22")

    async def test_short_password_message(self, identity):
        with pytest.raises(AuthError) as exc_info:
            await identity.sign_up("alice@example.com", "123")
        assert exc_info.value.message == "Password must be at least 6 characters."

    async def test_password_reset(self, identity):
        assert await identity.request_password_reset("ghost@example.com") == RESET_MESSAGE

    async def test_reset_code_sets_new_password(self, identity, reset_codes):
        await identity.sign_up("alice@example.com", "hunter22")
        identity.sign_out()
        await identity.request_password_reset("alice@example.com")
        [code] = reset_codes

        assert await identity.confirm_password_reset(code, "brand-new") == RESET_DONE_MESSAGE
        assert identity.state.is_absent
        user = await identity.sign_in("alice@example.com", "brand-new")
        assert user.email == "alice@example.com"

    async def test_bad_reset_code(self, identity):
        with pytest.raises(AuthError) as exc_info:
            await identity.confirm_password_reset("not-a-code", "brand-new")
        assert exc_info.value.message == INVALID_RESET_TOKEN

    async def test_sign_out_clears_cache(self, identity, cache):
        await identity.sign_up("alice@example.com", "hunter22")
        identity.sign_out()
        assert identity.token is None
        assert cache.load() is None
        assert identity.state.is_absent
