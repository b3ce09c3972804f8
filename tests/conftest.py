from typing import Any, Dict, List

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from chat_relay.config import Settings
from chat_relay.exceptions import UpstreamUnavailable
from chat_relay.main import create_app
from chat_relay.repositories.conversation_repository import ConversationRepository
from chat_relay.repositories.json_file import JsonDocumentFile
from chat_relay.routers.chat import get_roster_gateway


class FakeRoster:
    """Stands in for the tournament backend."""

    def __init__(self, participants: List[Dict[str, Any]] | None = None, fail: bool = False) -> None:
        self.participants = participants or []
        self.fail = fail
        self.calls: List[str] = []

    async def co_participants(self, wallet: str) -> List[Dict[str, Any]]:
        self.calls.append(wallet)
        if self.fail:
            raise UpstreamUnavailable("Failed to fetch tournament data")
        return list(self.participants)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(data_dir=tmp_path, roster_base_url="http://roster.test")


@pytest_asyncio.fixture
async def repo(tmp_path) -> ConversationRepository:
    repo = ConversationRepository(JsonDocumentFile(tmp_path / "messages.json"))
    await repo.open_or_initialize()
    return repo


@pytest.fixture
def roster() -> FakeRoster:
    return FakeRoster()


@pytest.fixture
def client(settings, roster):
    """FastAPI test client writing into a temporary data dir, with a fake roster."""
    app = create_app(settings)
    app.dependency_overrides[get_roster_gateway] = lambda: roster
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
