"""Исключения слоя вызова Podman CLI."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

LOGGER = logging.getLogger(__name__)


class PodmanagerError(Exception):
    """Базовое исключение приложения с поддержкой контекста."""

    def __init__(self, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.context = context or {}
        super().__init__(message)


class CLIInvocationError(PodmanagerError):
    """Команда не запустилась или завершилась с ненулевым кодом."""

    def __init__(self, command: str, message: str, return_code: Optional[int] = None) -> None:
        self.command = command
        self.return_code = return_code
        super().__init__(
            message,
            context={"command": command, "return_code": return_code},
        )
        LOGGER.error("Command failed: %s (code=%s): %s", command, return_code, message)


class ActionError(PodmanagerError):
    """Действие вызвано для узла неподходящего типа или без идентификатора."""

    def __init__(self, action: str, reason: str) -> None:
        self.action = action
        self.reason = reason
        super().__init__(
            f"Cannot {action}: {reason}",
            context={"action": action, "reason": reason},
        )
