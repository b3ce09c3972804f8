import asyncio
import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict
from uuid import uuid4

from chat_relay.exceptions import PersistenceError


logger = logging.getLogger(__name__)


class JsonDocumentFile:
    """One JSON document persisted as a whole file.

    Writes go to a temporary sibling first and are moved into place with
    ``os.replace`` so a crash never leaves a half-written record behind.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def open_or_initialize(self, default: Dict[str, Any]) -> Dict[str, Any]:
        return await asyncio.to_thread(self._open_or_initialize, default)

    async def read(self) -> Dict[str, Any]:
        return await asyncio.to_thread(self._read)

    async def write(self, data: Dict[str, Any]) -> None:
        await asyncio.to_thread(self._write, data)

    def _open_or_initialize(self, default: Dict[str, Any]) -> Dict[str, Any]:
        if self._path.exists():
            return self._read()
        data = copy.deepcopy(default)
        self._write(data)
        logger.info("%s created", self._path.name)
        return data

    def _read(self) -> Dict[str, Any]:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Failed to read {self._path.name}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"{self._path.name} does not hold a JSON object")
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        tmp_path = self._path.with_name(f"{self._path.name}.{uuid4().hex}.tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except (OSError, TypeError, ValueError) as e:
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError:
                logger.warning("Could not remove temporary file %s", tmp_path)
            raise PersistenceError(f"Failed to write {self._path.name}: {e}") from e
