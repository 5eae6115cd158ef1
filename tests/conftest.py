"""Pytest configuration and fixtures."""
from unittest.mock import AsyncMock

import pytest

from api.services.auth_provider import ProviderSession
from api.services.identity import IdentityGate
from shared.config import settings
from tests.factories import ADMIN_EMAIL, FakeDatabase, FakeRedis


@pytest.fixture
def fake_db():
    """Empty in-memory database."""
    return FakeDatabase()


@pytest.fixture
def indexed_db(fake_db):
    """Database whose category listing index exists."""
    fake_db.articles.indexes.add(settings.article_category_index)
    return fake_db


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def mock_auth_client():
    """Identity provider client that accepts the admin."""
    client = AsyncMock()
    client.sign_in_with_password = AsyncMock(return_value=ProviderSession(
        uid="uid_admin",
        address=ADMIN_EMAIL,
        id_token="token-admin",
        expires_in=3600
    ))
    return client


@pytest.fixture
def identity_gate(fake_redis, mock_auth_client):
    return IdentityGate(fake_redis, auth_client=mock_auth_client, admin_emails=[ADMIN_EMAIL])

