import httpx
import pytest
from bson import ObjectId
from mongomock_motor import AsyncMongoMockClient

from gamification.auth.auth_models import Role, User
from gamification.auth.auth_permissions import create_access_token
from gamification.core.database import get_db
from gamification.core.errors import UploadError
from gamification.main import app
from gamification.media.uploader import get_uploader
from gamification.payments.payment_service import PaymentService, get_payment_service


class FakeUploader:
    """Stands in for the media store; filenames containing "broken" fail"""

    def __init__(self):
        self.uploads = []

    async def upload(self, buffer, mimetype, folder, filename="upload"):
        if "broken" in filename:
            raise UploadError("File upload failed")
        self.uploads.append({"folder": folder, "filename": filename, "mimetype": mimetype, "size": len(buffer)})
        return {"secure_url": f"https://media.test/{folder}/{filename}"}

    async def close(self):
        pass


class GatewayStub:
    """Records gateway requests and answers with a canned response"""

    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self.body = body if body is not None else {"status": "success", "data": {"id": 1}}
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.body)


@pytest.fixture
def db():
    return AsyncMongoMockClient()["gamification_test"]


@pytest.fixture
def uploader():
    return FakeUploader()


@pytest.fixture
def gateway():
    return GatewayStub()


@pytest.fixture
def payment_service(gateway):
    return PaymentService(
        secret_key="FLWSECK_TEST",
        base_url="https://gateway.test/v3",
        redirect_url="https://app.test/redirect",
        client=httpx.AsyncClient(transport=httpx.MockTransport(gateway)),
    )


@pytest.fixture
async def client(db, uploader, payment_service):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_uploader] = lambda: uploader
    app.dependency_overrides[get_payment_service] = lambda: payment_service

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    await payment_service.close()


async def make_account(db, role: Role, username: str) -> dict:
    doc = User(
        username=username,
        email=f"{username}@example.com",
        password="not-a-real-hash",
        role=role,
    ).to_document()
    result = await db.users.insert_one(doc)
    doc["_id"] = result.inserted_id
    return doc


def auth_headers(account: dict) -> dict:
    return {"Authorization": f"Bearer {create_access_token(account)}"}


@pytest.fixture
async def instructor(db):
    return await make_account(db, Role.ADMIN, "instructor")


@pytest.fixture
async def other_instructor(db):
    return await make_account(db, Role.ADMIN, "other_instructor")


@pytest.fixture
async def learner(db):
    return await make_account(db, Role.USER, "learner")


@pytest.fixture
async def other_learner(db):
    return await make_account(db, Role.USER, "other_learner")


@pytest.fixture
async def course(db, instructor, learner, other_learner):
    doc = {
        "title": "Intro to Gamification",
        "instructorId": instructor["_id"],
        "learnerIds": [learner["_id"], other_learner["_id"]],
    }
    result = await db.courses.insert_one(doc)
    doc["_id"] = result.inserted_id
    return doc


def missing_id() -> str:
    return str(ObjectId())
