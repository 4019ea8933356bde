from __future__ import annotations

import logging as py_logging
from collections.abc import Iterator
from pathlib import Path

import pytest

import pollkit.config as pollkit_config
from pollkit.clock import ManualClock


@pytest.hookimpl(trylast=True)
def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    del config
    for item in items:
        path = Path(str(getattr(item, "path", item.fspath)))
        if "integration" in path.parts:
            item.add_marker(pytest.mark.integration)
            item.add_marker(pytest.mark.slow)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    path = tmp_path / "xdg" / "pollkit" / "config.toml"
    monkeypatch.setattr(pollkit_config, "DEFAULT_CONFIG_PATH", path)
    monkeypatch.delenv(pollkit_config.LOG_LEVEL_ENV, raising=False)
    return path


@pytest.fixture(autouse=True)
def reset_pollkit_logger() -> Iterator[None]:
    yield
    logger = py_logging.getLogger("pollkit")
    logger.handlers.clear()
    logger.setLevel(py_logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()
