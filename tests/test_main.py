"""Тесты вспомогательных функций модуля main."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from podmanager.actions import ResourceActions
from podmanager.main import build_services, initialize_workdir, setup_logging_from_settings
from podmanager.settings.groups import LoggingSettings
from podmanager.settings.registry import SettingsRegistry
from podmanager.tree.provider import ResourceTreeProvider
from podmanager.utils.logger import LOG_FILE_NAME


class DummySettings:
    def __init__(self, enabled: bool = True, level: str = "INFO") -> None:
        self.logging = LoggingSettings()
        self.logging.set("enabled", enabled)
        self.logging.set("level", level)

    def get_group(self, name: str):  # type: ignore[override]
        if name == "logging":
            return self.logging
        raise KeyError(name)


@pytest.fixture
def registry(tmp_path: Path) -> SettingsRegistry:
    SettingsRegistry._instance = None  # type: ignore[attr-defined]
    registry = SettingsRegistry(tmp_path / "config.json")
    yield registry
    SettingsRegistry._instance = None  # type: ignore[attr-defined]


def test_initialize_workdir_creates_structure(tmp_path: Path) -> None:
    base_dir = tmp_path / ".podmanager"
    assert initialize_workdir(base_dir)
    assert (base_dir / "logs").is_dir()


def test_initialize_workdir_reports_failure(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")
    assert not initialize_workdir(blocker / "nested")


def test_setup_logging_enabled_creates_log(tmp_path: Path) -> None:
    logging.disable(logging.NOTSET)
    settings = DummySettings(enabled=True, level="INFO")
    setup_logging_from_settings(tmp_path, settings)
    logger = logging.getLogger("test")
    logger.info("log entry")
    for handler in logging.getLogger().handlers:
        handler.flush()
    log_file = tmp_path / "logs" / LOG_FILE_NAME
    assert log_file.exists()
    assert "log entry" in log_file.read_text(encoding="utf-8")


def test_setup_logging_disabled(tmp_path: Path) -> None:
    logging.disable(logging.NOTSET)
    settings = DummySettings(enabled=False)
    setup_logging_from_settings(tmp_path, settings)
    assert logging.root.manager.disable >= logging.CRITICAL
    logging.disable(logging.NOTSET)


def test_build_services_uses_runtime_settings(
    registry: SettingsRegistry, tmp_path: Path
) -> None:
    registry.set_value("runtime", "podman_path", "/opt/podman/bin/podman")
    registry.set_value("runtime", "load_overview_on_start", False)

    invoker, provider, actions = build_services(registry, tmp_path)

    assert invoker.runtime_executable == "/opt/podman/bin/podman"
    assert isinstance(provider, ResourceTreeProvider)
    assert isinstance(actions, ResourceActions)
    assert actions.workspace_dir == tmp_path
    provider.shutdown()
