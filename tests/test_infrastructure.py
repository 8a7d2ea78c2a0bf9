import asyncio
import hashlib

import httpx
import pytest
from bson import ObjectId
from fastapi import FastAPI

from gamification.core.concurrency import fan_out
from gamification.core.config import Config
from gamification.core.database import serialize_mongo, to_object_id
from gamification.core.errors import UploadError
from gamification.core.responses import register_error_handlers
from gamification.media.uploader import MediaUploader

# ==================== FAN-OUT ====================

async def test_fan_out_keeps_order_and_collects_failures():
    async def worker(n):
        await asyncio.sleep(0.01 * (5 - n))
        if n % 2:
            raise ValueError(f"odd {n}")
        return n * 10

    result = await fan_out(range(5), worker, limit=2)

    assert result.succeeded == [0, 20, 40]
    assert result.failed == [{"item": 1, "error": "odd 1"}, {"item": 3, "error": "odd 3"}]
    assert result.summary(lambda n: {"n": n}) == {
        "succeeded": 3,
        "failed": [{"n": 1, "error": "odd 1"}, {"n": 3, "error": "odd 3"}],
    }


async def test_fan_out_respects_limit():
    in_flight = 0
    peak = 0

    async def worker(_):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1

    await fan_out(range(10), worker, limit=3)

    assert peak == 3


async def test_fan_out_with_nothing_to_do():
    async def worker(_):
        raise AssertionError("not called")

    result = await fan_out([], worker, limit=4)

    assert result.succeeded == [] and result.failed == []

# ==================== MEDIA UPLOADER ====================

def test_signature():
    uploader = MediaUploader("demo", "key", "secret", client=httpx.AsyncClient())

    signature = uploader.sign({"timestamp": 1700000000, "folder": "assessments"})

    expected = hashlib.sha1(b"folder=assessments&timestamp=1700000000secret").hexdigest()
    assert signature == expected


async def test_upload_posts_signed_form():
    requests = []

    def store(request):
        requests.append(request)
        return httpx.Response(200, json={"secure_url": "https://res.test/demo/a.pdf"})

    uploader = MediaUploader(
        "demo", "key", "secret",
        base_url="https://media.test/v1_1",
        client=httpx.AsyncClient(transport=httpx.MockTransport(store)),
    )

    result = await uploader.upload(b"%PDF", "application/pdf", "assessments", "a.pdf")

    assert result["secure_url"] == "https://res.test/demo/a.pdf"
    assert str(requests[0].url) == "https://media.test/v1_1/demo/auto/upload"
    body = requests[0].content
    assert b'name="signature"' in body
    assert b'name="api_key"' in body
    assert b'filename="a.pdf"' in body
    await uploader.close()


async def test_upload_failure_raises_upload_error():
    uploader = MediaUploader(
        "demo", "key", "secret",
        client=httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(500, text="boom"))),
    )

    with pytest.raises(UploadError) as exc_info:
        await uploader.upload(b"x", "image/png", "course-content")

    assert exc_info.value.details == {"status": 500}
    await uploader.close()

# ==================== CONFIG & DATABASE ====================

def test_production_requires_secrets(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.delenv("JWT_SECRET", raising=False)
    monkeypatch.delenv("FLUTTERWAVE_SECRET_KEY", raising=False)

    with pytest.raises(RuntimeError) as exc_info:
        Config().validate()

    assert "JWT_SECRET" in str(exc_info.value)


def test_development_defaults_validate(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "development")

    Config().validate()


def test_serialize_mongo():
    oid = ObjectId()

    assert serialize_mongo({"_id": oid, "ids": [oid], "nested": {"n": 1}}) == {
        "_id": str(oid),
        "ids": [str(oid)],
        "nested": {"n": 1},
    }
    assert to_object_id(str(oid)) == oid
    assert to_object_id("nope") is None


async def test_root(client):
    response = await client.get("/")

    assert response.json() == {"success": True, "message": "Welcome to Gamification API V1"}


async def test_unexpected_errors_become_generic_500():
    broken = FastAPI()
    register_error_handlers(broken)

    @broken.get("/boom")
    async def boom():
        raise RuntimeError("secret detail")

    transport = httpx.ASGITransport(app=broken, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/boom")

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "message": "An unexpected error occurred.",
        "error": {"type": "INTERNAL_SERVER_ERROR", "message": "An unexpected error occurred.", "details": None},
    }
    assert "secret detail" not in response.text
