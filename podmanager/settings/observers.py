"""Наблюдатели за изменением настроек."""

from __future__ import annotations

import logging
from typing import Callable, Protocol, runtime_checkable


@runtime_checkable
class SettingsObserver(Protocol):
    """Базовый контракт наблюдателя."""

    def on_setting_changed(
        self,
        group: str,
        key: str,
        old_value: object,
        new_value: object,
    ) -> None:
        """Обрабатывает событие изменения конкретного ключа."""


class LoggingSettingsObserver:
    """Пишет изменения настроек в журнал."""

    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def on_setting_changed(
        self,
        group: str,
        key: str,
        old_value: object,
        new_value: object,
    ) -> None:
        self._logger.info(
            "Setting changed: %s.%s (%r -> %r)",
            group,
            key,
            old_value,
            new_value,
        )


class RuntimePathObserver:
    """Вызывает ``on_change`` при смене путей к podman / podman-compose.

    Хост сбрасывает дерево: данные могли прийти от другого исполняемого файла.
    """

    WATCHED_KEYS = frozenset({"podman_path", "compose_path"})

    def __init__(self, on_change: Callable[[], None]) -> None:
        self._on_change = on_change
        self._logger = logging.getLogger(__name__)

    def on_setting_changed(
        self,
        group: str,
        key: str,
        old_value: object,
        new_value: object,
    ) -> None:
        if group != "runtime" or key not in self.WATCHED_KEYS or old_value == new_value:
            return
        self._logger.info("Runtime executable changed: %s=%r", key, new_value)
        self._on_change()
