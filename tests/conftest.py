"""
ZAP Confeitaria - Test fixtures
Banco SQLite em memória e cliente HTTP sobre a aplicação ASGI
"""
import os
import tempfile

# Configuração de teste antes de importar a aplicação
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test_secret"
os.environ["UPLOADS_DIR"] = tempfile.mkdtemp(prefix="zap-uploads-")
os.environ["SUBSCRIPTION_REQUIRED"] = "false"
os.environ["ERROR_NOTIFICATION_ENABLED"] = "false"

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.database import Base, get_db
from app.main import app as fastapi_app
from app.api.auth import limiter


@pytest.fixture
async def engine():
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False

    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client

    fastapi_app.dependency_overrides.clear()
    limiter.enabled = True


async def register(client, email="dona@confeitaria.com", company_name="Doces da Ana"):
    response = await client.post("/api/auth/register", json={
        "email": email,
        "password": "segredo123",
        "full_name": "Ana Souza",
        "company_name": company_name
    })
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
async def auth_headers(client):
    return await register(client)


@pytest.fixture
async def maria(client, auth_headers):
    response = await client.post("/api/clients", json={
        "name": "Maria",
        "phone": "(11) 98765-4321"
    }, headers=auth_headers)
    assert response.status_code == 201, response.text
    return response.json()


async def create_order(client, headers, client_id=None, items=None, **extra):
    payload = {
        "client_id": client_id,
        "items": items if items is not None else [
            {"product_name": "Bolo de chocolate", "quantity": 1, "unit_price": 200}
        ],
    }
    payload.update(extra)
    response = await client.post("/api/orders", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()
