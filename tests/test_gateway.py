"""Backend client tests: authorization injection and failure classification."""

import httpx
import pytest

from exceptions import RequestFailedError, SessionExpiredError, UnreachableError
from gateway import BackendClient


@pytest.fixture
def client(storage, clock, backend):
    return BackendClient(storage, base_url="http://backend.test", clock=clock, transport=backend.transport)


@pytest.mark.asyncio
async def test_valid_credential_is_sent_as_bearer(client, storage, backend):
    storage.save_tokens("access-1", None, 3600)
    backend.on("GET", "/api/auth/status", httpx.Response(200, json={"user": {"id": "u1"}}))

    data = await client.get("/api/auth/status")

    assert data == {"user": {"id": "u1"}}
    assert backend.requests[0].headers["authorization"] == "Bearer access-1"
    assert str(backend.requests[0].url) == "http://backend.test/api/auth/status"


@pytest.mark.asyncio
async def test_expired_credential_is_discarded_and_request_goes_out_unauthenticated(client, storage, clock, backend):
    storage.save_tokens("access-1", "refresh-1", 3600)
    clock.advance(3600 * 1000 - 30_000)
    backend.on("GET", "/api/ping", httpx.Response(200, json={"ok": True}))

    await client.get("/api/ping")

    assert "authorization" not in backend.requests[0].headers
    assert storage.load() is None


@pytest.mark.asyncio
async def test_no_credential_dispatches_unauthenticated(client, backend):
    backend.on("GET", "/api/ping", httpx.Response(200, json={"ok": True}))

    assert await client.get("/api/ping") == {"ok": True}
    assert "authorization" not in backend.requests[0].headers


@pytest.mark.asyncio
async def test_post_sends_json_body(client, backend):
    backend.on("POST", "/api/convert", httpx.Response(200, json={"success": True}))

    await client.post("/api/convert", json={"playlist_url": "u"})

    assert backend.json_body() == {"playlist_url": "u"}


@pytest.mark.asyncio
async def test_401_clears_store_and_raises_session_expired(client, storage, backend):
    storage.save_tokens("access-1", "refresh-1", 3600)
    backend.on("GET", "/api/auth/status", httpx.Response(401, json={"error": "Token revoked"}))

    with pytest.raises(SessionExpiredError) as exc_info:
        await client.get("/api/auth/status")

    assert exc_info.value.message == "Token revoked"
    assert storage.load() is None


@pytest.mark.asyncio
async def test_401_without_body_uses_default_message(client, backend):
    backend.on("GET", "/api/auth/status", httpx.Response(401))

    with pytest.raises(SessionExpiredError) as exc_info:
        await client.get("/api/auth/status")

    assert exc_info.value.message == "Authentication required. Please log in."


@pytest.mark.asyncio
async def test_auth_required_flag_is_treated_as_session_expiry(client, storage, backend):
    storage.save_tokens("access-1", None, 3600)
    backend.on("POST", "/api/convert", httpx.Response(403, json={"auth_required": True}))

    with pytest.raises(SessionExpiredError):
        await client.post("/api/convert", json={})

    assert storage.load() is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body, expected",
    [
        ({"message": "Playlist is private", "error": "not_found"}, "Playlist is private"),
        ({"error": "not_found"}, "not_found"),
        ({}, "Request failed with status 404"),
    ],
)
async def test_other_errors_prefer_backend_message(client, backend, body, expected):
    backend.on("POST", "/api/convert", httpx.Response(404, json=body))

    with pytest.raises(RequestFailedError) as exc_info:
        await client.post("/api/convert", json={})

    assert exc_info.value.status == 404
    assert exc_info.value.message == expected


@pytest.mark.asyncio
async def test_non_json_error_reports_status(client, storage, backend):
    storage.save_tokens("access-1", None, 3600)
    backend.on("POST", "/api/convert", httpx.Response(502, text="<html>Bad Gateway</html>"))

    with pytest.raises(RequestFailedError) as exc_info:
        await client.post("/api/convert", json={})

    assert exc_info.value.message == "HTTP error! status: 502"
    # Only a 401 ends the session
    assert storage.load() is not None


@pytest.mark.asyncio
async def test_non_json_success_is_reported_as_success(client, backend):
    backend.on("GET", "/api/ping", httpx.Response(204))

    assert await client.get("/api/ping") == {"success": True}


@pytest.mark.asyncio
async def test_json_success_body_is_returned_as_sent(client, backend):
    backend.on("GET", "/api/items", httpx.Response(200, json=[1, 2]))

    assert await client.get("/api/items") == [1, 2]


@pytest.mark.asyncio
async def test_transport_failure_is_unreachable(storage, clock):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = BackendClient(storage, base_url="http://backend.test", clock=clock, transport=httpx.MockTransport(refuse))

    with pytest.raises(UnreachableError) as exc_info:
        await client.get("/api/auth/status")

    assert not isinstance(exc_info.value, httpx.HTTPError)


@pytest.mark.asyncio
async def test_timeout_is_unreachable(storage, clock):
    def hang(request):
        raise httpx.ReadTimeout("timed out", request=request)

    client = BackendClient(storage, base_url="http://backend.test", clock=clock, transport=httpx.MockTransport(hang))

    with pytest.raises(UnreachableError):
        await client.get("/api/auth/status")


@pytest.mark.asyncio
async def test_each_call_is_a_single_attempt(client, backend):
    backend.on("GET", "/api/ping", httpx.Response(500, json={"error": "boom"}))

    with pytest.raises(RequestFailedError):
        await client.get("/api/ping")

    assert len(backend.requests) == 1
