from structlog.contextvars import get_contextvars

from core.logging import REQUEST_ID_HEADER


def test_every_response_carries_a_request_id(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert len(resp.headers[REQUEST_ID_HEADER]) == 32


def test_incoming_request_id_is_echoed(client):
    resp = client.get("/api/v1/medications", headers={REQUEST_ID_HEADER: "trace-123"})

    assert resp.status_code == 401
    assert resp.headers[REQUEST_ID_HEADER] == "trace-123"


def test_signed_in_user_is_bound_to_log_context(auth_client, app):
    from fastapi import Depends

    from api.deps import get_current_active_user_dependency

    @app.get("/_log_context")
    async def log_context(user=Depends(get_current_active_user_dependency)):
        return get_contextvars()

    try:
        body = auth_client.get("/_log_context", headers={REQUEST_ID_HEADER: "ctx-1"}).json()
    finally:
        app.router.routes.pop()

    assert body["request_id"] == "ctx-1"
    assert body["path"] == "/_log_context"
    assert isinstance(body["user_id"], int)
