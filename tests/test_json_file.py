import json

import pytest

from chat_relay.exceptions import PersistenceError
from chat_relay.repositories.chat_user_repository import ChatUserRepository
from chat_relay.repositories.json_file import JsonDocumentFile


@pytest.mark.asyncio
async def test_open_or_initialize_keeps_existing_file(tmp_path):
    path = tmp_path / "chatUsers.json"
    path.write_text(json.dumps({"users": {"0xab": {"muted": True}}}), encoding="utf-8")
    data = await JsonDocumentFile(path).open_or_initialize({"users": {}})
    assert data == {"users": {"0xab": {"muted": True}}}


@pytest.mark.asyncio
async def test_write_is_pretty_printed_and_leaves_no_temp_files(tmp_path):
    path = tmp_path / "nested" / "doc.json"
    await JsonDocumentFile(path).write({"a": 1})
    assert path.read_text(encoding="utf-8") == '{\n  "a": 1\n}'
    assert [p.name for p in path.parent.iterdir()] == ["doc.json"]


@pytest.mark.asyncio
async def test_write_failure_raises_persistence_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    with pytest.raises(PersistenceError):
        await JsonDocumentFile(blocker / "doc.json").write({"a": 1})


@pytest.mark.asyncio
async def test_non_object_document_is_rejected(tmp_path):
    path = tmp_path / "doc.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(PersistenceError):
        await JsonDocumentFile(path).read()


@pytest.mark.asyncio
async def test_chat_users_record_initialised_empty(tmp_path):
    path = tmp_path / "chatUsers.json"
    repo = ChatUserRepository(JsonDocumentFile(path))
    await repo.open_or_initialize()
    assert json.loads(path.read_text(encoding="utf-8")) == {"users": {}}
    assert await repo.get_users() == {}
