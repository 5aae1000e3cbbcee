from collections.abc import Generator
from datetime import datetime
from pathlib import Path
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from cleanclick.api.deps import get_identity_provider, get_now
from cleanclick.core.identity import IdentityUser
from cleanclick.main import app
from cleanclick.repositories import get_repository
from cleanclick.repositories.json_file import JsonFileRepository
from tests.utils import FIXED_NOW, make_cleaner, make_flat_table_cleaner


class FakeIdentityProvider:
    """Token ``token-<id>`` belongs to user ``<id>``; ``users`` are known by id."""

    def __init__(self) -> None:
        self.users = {
            "new-cleaner": IdentityUser(
                id="new-cleaner", email="new@example.com", name="Nora New"
            ),
        }

    def verify_token(self, token: str) -> Optional[str]:
        if token.startswith("token-"):
            return token.removeprefix("token-")
        return None

    def lookup_user(self, user_id: str) -> Optional[IdentityUser]:
        return self.users.get(user_id)


@pytest.fixture
def repository(tmp_path: Path) -> JsonFileRepository:
    repo = JsonFileRepository(tmp_path / "db.json", seed=False)
    repo.create_cleaner(make_cleaner("c1"))
    repo.create_cleaner(make_flat_table_cleaner("c2"))
    return repo


@pytest.fixture
def identity() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def client(
    repository: JsonFileRepository,
    identity: FakeIdentityProvider,
    now: datetime,
) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_repository] = lambda: repository
    app.dependency_overrides[get_identity_provider] = lambda: identity
    app.dependency_overrides[get_now] = lambda: now
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
