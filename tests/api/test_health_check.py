"""Health Check - liveness probe over a live server.

Invariants:
    - GET /health_check returns 200 with a zero-length body
    - The probe answers whatever state the database is in
"""

from sqlalchemy import text


async def test_health_check_works(app):
    res = await app.get_health_check()

    assert res.status_code == 200
    assert res.headers["content-length"] == "0"
    assert res.content == b""


async def test_health_check_is_repeatable(app):
    for _ in range(3):
        res = await app.get_health_check()
        assert res.status_code == 200
        assert res.content == b""


async def test_health_check_ignores_database_state(app):
    """Dropping the table does not affect liveness."""
    async with app.db_manager.session() as db:
        await db.execute(text("DROP TABLE subscriptions"))
        await db.commit()

    res = await app.get_health_check()
    assert res.status_code == 200
    assert res.content == b""


async def test_responses_carry_request_id(app):
    res = await app.get_health_check()
    assert res.headers["x-request-id"]


async def test_request_id_from_client_is_echoed(app):
    res = await app.api_client.get(
        f"{app.address}/health_check", headers={"X-Request-ID": "abc123"},
    )
    assert res.headers["x-request-id"] == "abc123"


async def test_only_two_routes_are_served(app):
    res = await app.api_client.get(f"{app.address}/subscriptions")
    assert res.status_code == 405

    res = await app.api_client.post(f"{app.address}/health_check")
    assert res.status_code == 405

    res = await app.api_client.get(f"{app.address}/api/v1/health/")
    assert res.status_code == 404
