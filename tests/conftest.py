import shutil
from pathlib import Path
from typing import Any, Callable

import pytest

from queue_mincer.queue.manager import get_queue
from queue_mincer.settings import QueueSettings
from tests.shared import FakeSheetsService

FIXTURES_PATH = (Path(__file__).parent / "fixtures").absolute()


@pytest.fixture(scope="session")
def fixtures_path() -> Path:
    return FIXTURES_PATH


@pytest.fixture(scope="function")
def templates_path(tmp_path) -> Path:
    """A writable copy of the fixture templates"""
    path = tmp_path / "templates"
    shutil.copytree(FIXTURES_PATH / "templates", path)
    return path


@pytest.fixture(scope="function")
def make_settings(templates_path) -> Callable[..., QueueSettings]:
    def _make_settings(**data: Any) -> QueueSettings:
        data.setdefault("templates_uri", str(templates_path))
        return QueueSettings(**data)

    return _make_settings


@pytest.fixture(autouse=True, scope="function")
def cache_clear():
    get_queue.cache_clear()
    yield


@pytest.fixture(scope="function")
def sheets_service() -> FakeSheetsService:
    return FakeSheetsService(
        {
            "tasks": [
                ["task", "done", "priority"],
                ["write docs", "FALSE", "1"],
                ["fix bug", "TRUE", "2"],
                ["release", "FALSE"],
            ],
            "chores": [
                ["task", "done", "priority"],
                ["dishes", "FALSE", "5"],
            ],
        }
    )


@pytest.fixture(scope="function")
def credentials_path(tmp_path) -> Path:
    path = tmp_path / "credentials.json"
    path.write_text('{"spreadsheetId": "sheet-123", "apiKey": "secret"}')
    return path
