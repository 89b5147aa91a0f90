"""Высокоуровневые утилиты для создания и запуска GUI приложения."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from PySide6 import QtWidgets

from podmanager.actions import ResourceActions
from podmanager.i18n.translator import set_language
from podmanager.runtime.invoker import CLIInvoker
from podmanager.settings.registry import SettingsRegistry
from podmanager.tree.provider import ResourceTreeProvider
from podmanager.ui.main_window import create_main_window
from podmanager.ui.styles.theme_manager import apply_theme


class RunnableApp(Protocol):
    """Интерфейс приложения, которое можно запустить и получить код возврата."""

    def run(self) -> int:  # pragma: no cover - протокол
        """Запускает цикл приложения и возвращает код завершения."""


@dataclass
class GUIApp:
    """Приложение PySide6: передаёт провайдер дерева и действия в UI."""

    settings: SettingsRegistry
    invoker: CLIInvoker
    provider: ResourceTreeProvider
    actions: ResourceActions
    workspace_dir: Path

    def __post_init__(self) -> None:
        """Создаёт экземпляр QApplication и главное окно."""

        self._qt_app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
        if isinstance(self._qt_app, QtWidgets.QApplication):
            apply_theme(self._qt_app, self.settings)
        set_language(self.settings.get_value("app", "language", default="en"))
        self._window = create_main_window(
            settings=self.settings,
            invoker=self.invoker,
            provider=self.provider,
            actions=self.actions,
            workspace_dir=self.workspace_dir,
        )

    def run(self) -> int:
        """Запускает основной цикл приложения."""

        self._window.show()
        return self._qt_app.exec()


def create_application(
    settings: SettingsRegistry,
    invoker: CLIInvoker,
    provider: ResourceTreeProvider,
    actions: ResourceActions,
    workspace_dir: Path,
) -> RunnableApp:
    """Фабрика GUI приложения."""

    return GUIApp(
        settings=settings,
        invoker=invoker,
        provider=provider,
        actions=actions,
        workspace_dir=workspace_dir,
    )
