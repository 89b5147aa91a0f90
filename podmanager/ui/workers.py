"""Фоновые задачи, чтобы вызовы podman не блокировали UI."""

from __future__ import annotations

import logging
from typing import Any, Callable

from PySide6 import QtCore

from podmanager.runtime.exceptions import PodmanagerError

LOGGER = logging.getLogger(__name__)


class TaskThread(QtCore.QThread):
    """Выполняет функцию в отдельном потоке и отдаёт результат сигналом."""

    result_ready = QtCore.Signal(object)
    error = QtCore.Signal(str)

    def __init__(self, func: Callable[[], Any], *, name: str = "task") -> None:
        super().__init__()
        self._func = func
        self.setObjectName(name)

    def run(self) -> None:
        if self.isInterruptionRequested():
            return
        try:
            result = self._func()
        except PodmanagerError as exc:
            LOGGER.error("Task %s failed: %s", self.objectName(), exc.message)
            self.error.emit(exc.message)
            return
        self.result_ready.emit(result)
