import asyncio
import os
import tempfile

import pytest

# Settings are read at import time, so the environment is fixed before storefront loads
_tmpdir = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmpdir, 'storefront-test.db')}"
os.environ["STORAGE_BACKEND"] = "sql"
os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "admin12345"

from fastapi.testclient import TestClient  # noqa: E402

from storefront.core.config import settings  # noqa: E402
from storefront.core.database import close_db, drop_db, init_db  # noqa: E402
from storefront.core.security import SecurityUtils  # noqa: E402
from storefront.main import create_app  # noqa: E402
from storefront.models import UserRole  # noqa: E402
from storefront.storage import MemoryStorage, SQLStorageProvider  # noqa: E402

from tests.helpers import auth_header, register  # noqa: E402


async def _reset_database():
    await drop_db()
    await init_db()
    async with SQLStorageProvider().session() as storage:
        await storage.users.create({
            "username": settings.ADMIN_USERNAME,
            "email": settings.ADMIN_EMAIL,
            "password_hash": SecurityUtils.hash_password(settings.ADMIN_PASSWORD),
            "role": UserRole.ADMIN,
        })
    await close_db()


@pytest.fixture()
def client():
    asyncio.run(_reset_database())
    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture()
def admin_headers(client):
    response = client.post(
        "/api/v1/auth/login",
        json={"username": settings.ADMIN_USERNAME, "password": settings.ADMIN_PASSWORD},
    )
    assert response.status_code == 200, response.text
    return auth_header(response.json()["accessToken"])


@pytest.fixture()
def user_account(client):
    return register(client, "alice")


@pytest.fixture()
def user_headers(user_account):
    return auth_header(user_account["accessToken"])


@pytest.fixture()
def make_product(client, admin_headers):
    def _make(name="Linen Shirt", price="10.00", inventory=10, **extra):
        payload = {
            "name": name,
            "description": f"{name} description",
            "imageUrl": "https://example.com/image.jpg",
            "category": "ladies",
            "subcategory": "shirts-blouses",
            "price": price,
            "inventory": inventory,
            **extra,
        }
        response = client.post("/api/v1/products", json=payload, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture()
def memory_storage():
    return MemoryStorage()
