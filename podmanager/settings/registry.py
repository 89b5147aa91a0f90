"""Реестр настроек панели (Singleton) и файл config.json."""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type

from podmanager.settings.exceptions import (
    SettingsIOError,
    SettingsNotFoundError,
    SettingsValidationError,
)
from podmanager.settings.groups import (
    AppSettings,
    LoggingSettings,
    RuntimeSettings,
    SettingsGroup,
    TerminalSettings,
    ThemeSettings,
)
from podmanager.settings.observers import SettingsObserver
from podmanager.settings.schemas import DEFAULT_CONFIG
from podmanager.utils.paths import CONFIG_DIR

GROUP_TYPES: Tuple[Type[SettingsGroup], ...] = (
    RuntimeSettings,
    AppSettings,
    LoggingSettings,
    TerminalSettings,
    ThemeSettings,
)


class SettingsRegistry:
    """Singleton: группы настроек, наблюдатели и чтение/запись config.json.

    Ключи верхнего уровня, не являющиеся группами (``version``,
    ``schema_version``), хранятся как метаданные и пишутся обратно без изменений.
    """

    _instance: Optional["SettingsRegistry"] = None

    def __new__(cls, config_path: Optional[Path] = None) -> "SettingsRegistry":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None) -> None:
        if getattr(self, "_initialized", False):
            if config_path is not None:
                self._file_path = config_path
            return

        self._logger = logging.getLogger(__name__)
        self._file_path = config_path or CONFIG_DIR / "config.json"
        self._groups: Dict[str, SettingsGroup] = {
            group_type.group_name: group_type() for group_type in GROUP_TYPES
        }
        self._observers: List[SettingsObserver] = []
        self._metadata = self._split_metadata(DEFAULT_CONFIG)
        self._initialized = True

    @property
    def config_path(self) -> Path:
        return self._file_path

    # --------------------------------------------------------------------- API
    def get_value(self, group: str, key: str, default: Any = None) -> Any:
        """Значение ``group.key``; ``default`` подменяет только отсутствующий ключ."""

        try:
            return self._require_group(group).get(key)
        except SettingsNotFoundError:
            if default is None:
                raise
            return default

    def set_value(self, group: str, key: str, value: Any) -> None:
        settings_group = self._require_group(group)
        old_value = settings_group.get(key)
        settings_group.set(key, value)
        self._notify(group, key, old_value, value)

    def get_group(self, group: str) -> SettingsGroup:
        return self._require_group(group)

    def register_observer(self, observer: SettingsObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unregister_observer(self, observer: SettingsObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    # ---------------------------------------------------------------------- IO
    def save_to_disk(self, path: Optional[Path] = None) -> None:
        target = path or self._file_path
        payload = dict(self._metadata)
        payload.update({name: group.to_dict() for name, group in self._groups.items()})
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as exc:
            raise SettingsIOError(target, str(exc)) from exc

    def load_from_disk(self, path: Optional[Path] = None) -> None:
        """Читает config.json поверх значений по умолчанию.

        Отсутствующий файл создаётся с настройками по умолчанию. Недостающие
        ключи групп берутся из ``DEFAULT_CONFIG``, лишние игнорируются.
        """

        target = path or self._file_path
        if not target.exists():
            self._logger.info("Config file %s not found, writing defaults.", target)
            self.save_to_disk(target)
            return

        merged = self._with_defaults(self._read(target))
        self._metadata = self._split_metadata(merged)
        for name, group in self._groups.items():
            section = merged.get(name)
            if isinstance(section, dict):
                group.from_dict(section)
        self.validate()

    def validate(self) -> bool:
        for name, group in self._groups.items():
            for key in group.keys():
                value = group.get(key)
                is_valid, error = group.validate(key, value)
                if not is_valid:
                    raise SettingsValidationError(key=f"{name}.{key}", value=value, reason=error)
        return True

    # ----------------------------------------------------------------- helpers
    def _notify(self, group: str, key: str, old_value: Any, new_value: Any) -> None:
        for observer in list(self._observers):
            try:
                observer.on_setting_changed(group, key, old_value, new_value)
            except Exception as exc:  # pragma: no cover
                self._logger.error("Observer %s failed: %s", observer, exc, exc_info=True)

    def _require_group(self, group: str) -> SettingsGroup:
        try:
            return self._groups[group]
        except KeyError:
            raise SettingsNotFoundError(group, None) from None

    @staticmethod
    def _read(target: Path) -> Dict[str, Any]:
        try:
            content = json.loads(target.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise SettingsIOError(target, str(exc)) from exc
        if not isinstance(content, dict):
            raise SettingsIOError(target, "top-level JSON value must be an object")
        return content

    @staticmethod
    def _with_defaults(incoming: Dict[str, Any]) -> Dict[str, Any]:
        merged = copy.deepcopy(DEFAULT_CONFIG)
        for key, value in incoming.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key].update(value)
            else:
                merged[key] = value
        return merged

    def _split_metadata(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return {key: value for key, value in data.items() if key not in self._groups}
