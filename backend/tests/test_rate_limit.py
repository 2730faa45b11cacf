"""
Folio Backend — Rate Limiter Unit Tests
=========================================

What:  Exercises RateLimitMiddleware.dispatch directly, without an app.
How:   Window expiry is simulated by moving a window's start time back.
"""

import pytest
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from app.middleware.rate_limit import RateLimitMiddleware

pytestmark = pytest.mark.asyncio


def make_request(path: str = "/api/projects", ip: str = "10.0.0.1") -> Request:
    return Request({
        "type": "http",
        "method": "GET",
        "path": path,
        "root_path": "",
        "query_string": b"",
        "headers": [],
        "client": (ip, 5000),
    })


async def call_next(request: Request):
    return PlainTextResponse("ok")


@pytest.fixture
def limiter():
    return RateLimitMiddleware(app=None, max_requests=2, window_seconds=600)


async def test_allows_up_to_limit(limiter):
    for _ in range(2):
        response = await limiter.dispatch(make_request(), call_next)
        assert response.status_code == 200


async def test_rejects_over_limit_with_retry_after(limiter):
    for _ in range(2):
        await limiter.dispatch(make_request(), call_next)

    response = await limiter.dispatch(make_request(), call_next)

    assert response.status_code == 429
    assert 0 < int(response.headers["Retry-After"]) <= 600


async def test_counters_are_per_ip(limiter):
    for _ in range(2):
        await limiter.dispatch(make_request(ip="10.0.0.1"), call_next)

    response = await limiter.dispatch(make_request(ip="10.0.0.2"), call_next)

    assert response.status_code == 200


async def test_new_window_after_expiry(limiter):
    for _ in range(2):
        await limiter.dispatch(make_request(), call_next)
    limiter._windows["10.0.0.1"].started -= 600

    response = await limiter.dispatch(make_request(), call_next)

    assert response.status_code == 200
    assert limiter._windows["10.0.0.1"].count == 1


async def test_paths_outside_api_not_counted(limiter):
    for _ in range(5):
        response = await limiter.dispatch(make_request(path="/health"), call_next)
        assert response.status_code == 200

    assert limiter._windows == {}


async def test_cleanup_drops_expired_windows(limiter):
    await limiter.dispatch(make_request(ip="10.0.0.1"), call_next)
    await limiter.dispatch(make_request(ip="10.0.0.2"), call_next)
    limiter._windows["10.0.0.1"].started -= 600

    limiter._cleanup_expired(limiter._windows["10.0.0.2"].started)

    assert list(limiter._windows) == ["10.0.0.2"]
