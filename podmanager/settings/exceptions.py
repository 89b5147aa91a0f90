"""Исключения подсистемы настроек."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from podmanager.runtime.exceptions import PodmanagerError

LOGGER = logging.getLogger(__name__)


class SettingsError(PodmanagerError):
    """Базовая ошибка настроек; логируется при создании."""

    def __init__(self, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, context=context)
        LOGGER.error("%s | context=%s", message, self.context)


class SettingsNotFoundError(SettingsError):
    """Нужный ключ или группа отсутствуют."""

    def __init__(self, group: str, key: Optional[str] = None) -> None:
        suffix = f".{key}" if key else ""
        super().__init__(
            f"Setting '{group}{suffix}' not found",
            context={"group": group, "key": key},
        )


class SettingsValidationError(SettingsError):
    def __init__(self, key: str, value: Any, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(
            f"Validation error for '{key}': {reason} (value={value!r})",
            context={"key": key, "value": value, "reason": reason},
        )


class SettingsIOError(SettingsError):
    """Ошибка чтения или записи config.json."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(
            f"I/O error with settings file '{path}': {reason}",
            context={"path": str(path), "reason": reason},
        )
