"""Наблюдатели за деревом ресурсов."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable


@runtime_checkable
class TreeObserver(Protocol):
    """Контракт подписчика: хост перерисовывает дерево и показывает ошибки."""

    def on_tree_changed(self) -> None:
        """Дерево устарело целиком, нужно перечитать корни."""

    def on_fetch_error(self, cache_key: str, message: str) -> None:
        """Загрузка ветки завершилась ошибкой CLI."""


class LoggingTreeObserver:
    """Наблюдатель, который отправляет события в журнал."""

    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def on_tree_changed(self) -> None:
        self._logger.info("Resource tree invalidated")

    def on_fetch_error(self, cache_key: str, message: str) -> None:
        self._logger.warning("Failed to load %s: %s", cache_key, message)
