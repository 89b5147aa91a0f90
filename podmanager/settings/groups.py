"""Классы групп настроек с валидацией."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Tuple

from podmanager.settings.exceptions import SettingsNotFoundError, SettingsValidationError
from podmanager.settings.validators import (
    ChoiceValidator,
    ExecutableValidator,
    HexColorValidator,
    IntRangeValidator,
    TypeValidator,
    Validator,
)


class SettingsGroup(ABC):
    """Абстрактная база для конкретных групп настроек."""

    group_name: str = ""

    def __init__(self) -> None:
        self._defaults: Dict[str, Any] = {}
        self._validators: Dict[str, Validator] = {}
        self._initialize_defaults()
        self._setup_validators()
        self._values: Dict[str, Any] = dict(self._defaults)

    @abstractmethod
    def _initialize_defaults(self) -> None:
        """Задаёт значения по умолчанию для группы."""

    @abstractmethod
    def _setup_validators(self) -> None:
        """Привязывает валидаторы к ключам группы."""

    def keys(self) -> Tuple[str, ...]:
        return tuple(self._defaults.keys())

    def get(self, key: str, default: Any = None) -> Any:
        """Возвращает значение настройки."""

        if key not in self._defaults:
            raise SettingsNotFoundError(self.group_name, key)
        return self._values.get(key, default)

    def validate(self, key: str, value: Any) -> Tuple[bool, str]:
        validator = self._validators.get(key)
        if not validator:
            return True, ""
        return validator.validate(value)

    def set(self, key: str, value: Any) -> None:
        """Сохраняет значение, выбрасывая ошибку при невалидных данных."""

        if key not in self._defaults:
            raise SettingsNotFoundError(self.group_name, key)
        is_valid, error = self.validate(key, value)
        if not is_valid:
            raise SettingsValidationError(
                key=f"{self.group_name}.{key}",
                value=value,
                reason=error,
            )
        self._values[key] = value

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    def from_dict(self, data: Dict[str, Any]) -> None:
        """Заполняет значениями из словаря; неизвестные ключи пропускаются."""

        for key, value in data.items():
            if key in self._defaults:
                self.set(key, value)


class RuntimeSettings(SettingsGroup):
    """Где искать podman и как часто перечитывать дерево."""

    group_name = "runtime"

    def _initialize_defaults(self) -> None:
        self._defaults = {
            # пустая строка: голое имя podman из PATH
            "podman_path": "",
            "compose_path": "podman-compose",
            "refresh_debounce_ms": 300,
            "load_overview_on_start": True,
        }

    def _setup_validators(self) -> None:
        self._validators = {
            "podman_path": ExecutableValidator(),
            "compose_path": ExecutableValidator(),
            "refresh_debounce_ms": IntRangeValidator(50, 5000),
            "load_overview_on_start": TypeValidator(bool),
        }


class AppSettings(SettingsGroup):
    """Базовые настройки приложения."""

    group_name = "app"

    def _initialize_defaults(self) -> None:
        self._defaults = {
            "language": "en",
            "theme": "system",
            "window_width": 420,
            "window_height": 800,
        }

    def _setup_validators(self) -> None:
        self._validators = {
            "language": ChoiceValidator(["ru", "en"]),
            "theme": ChoiceValidator(["light", "dark", "system"]),
            "window_width": IntRangeValidator(240, 10000),
            "window_height": IntRangeValidator(320, 10000),
        }


class LoggingSettings(SettingsGroup):
    """Настройки логирования приложения."""

    group_name = "logging"

    def _initialize_defaults(self) -> None:
        self._defaults = {
            "enabled": True,
            "level": "INFO",
            "max_file_size_mb": 10,
            "max_archived_files": 5,
        }

    def _setup_validators(self) -> None:
        self._validators = {
            "enabled": TypeValidator(bool),
            "level": ChoiceValidator(["DEBUG", "INFO", "WARNING", "ERROR"]),
            "max_file_size_mb": IntRangeValidator(1, 1000),
            "max_archived_files": IntRangeValidator(1, 50),
        }


class TerminalSettings(SettingsGroup):
    """Оболочка для интерактивной консоли контейнера."""

    group_name = "terminal"

    def _initialize_defaults(self) -> None:
        self._defaults = {
            "container_shell": "/bin/sh",
        }

    def _setup_validators(self) -> None:
        self._validators = {
            "container_shell": TypeValidator(str),
        }


class ThemeSettings(SettingsGroup):
    """Цвета панели и шрифт."""

    group_name = "theme"

    def _initialize_defaults(self) -> None:
        self._defaults = {
            "background_light": "#fcfcf9",
            "background_dark": "#1f2121",
            "text_light": "#134252",
            "text_dark": "#f5f5f5",
            "selection_background_light": "#d2edf4",
            "selection_background_dark": "#3a505a",
            "running_color": "#2e9d4f",
            "stopped_color": "#c01547",
            "font_family": "",
            "font_size": 11,
        }

    def _setup_validators(self) -> None:
        validator = HexColorValidator()
        color_keys = [
            key for key in self._defaults.keys() if key not in {"font_family", "font_size"}
        ]
        self._validators = {key: validator for key in color_keys}
        self._validators["font_family"] = TypeValidator(str)
        self._validators["font_size"] = IntRangeValidator(6, 48)
