"""Точка входа в приложение Podman Manager."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from podmanager import __version__
from podmanager.actions import ResourceActions
from podmanager.app import create_application
from podmanager.runtime.invoker import CLIInvoker
from podmanager.settings.observers import LoggingSettingsObserver
from podmanager.settings.registry import SettingsRegistry
from podmanager.tree.observers import LoggingTreeObserver
from podmanager.tree.provider import ResourceTreeProvider
from podmanager.utils.logger import configure_logging
from podmanager.utils.paths import resolve_base_dir

LOGGER = logging.getLogger(__name__)


def initialize_settings(config_path: Path) -> SettingsRegistry:
    """Получает singleton реестр настроек и загружает config.json."""

    registry = SettingsRegistry(config_path=config_path)
    registry.load_from_disk()
    return registry


def setup_logging_from_settings(base_dir: Path, settings: SettingsRegistry) -> None:
    """Настраивает логирование в соответствии с LoggingSettings."""

    logging_settings = settings.get_group("logging")
    if not logging_settings.get("enabled"):
        logging.disable(logging.CRITICAL)
        return

    logging.disable(logging.NOTSET)
    configure_logging(
        log_dir=base_dir / "logs",
        level_name=logging_settings.get("level"),
        max_bytes=logging_settings.get("max_file_size_mb") * 1024 * 1024,
        backup_count=logging_settings.get("max_archived_files"),
    )


def initialize_workdir(base_dir: Path) -> bool:
    """Создаёт рабочую структуру (~/.podmanager, logs)."""

    try:
        base_dir.mkdir(parents=True, exist_ok=True)
        (base_dir / "logs").mkdir(exist_ok=True)
        return True
    except OSError as exc:
        LOGGER.error("Failed to initialize working directory: %s", exc)
        return False


def build_services(
    settings: SettingsRegistry,
    workspace_dir: Path,
) -> tuple[CLIInvoker, ResourceTreeProvider, ResourceActions]:
    """Собирает invoker, провайдер дерева и действия по текущим настройкам."""

    invoker = CLIInvoker(settings)
    provider = ResourceTreeProvider(
        invoker,
        debounce_ms=int(settings.get_value("runtime", "refresh_debounce_ms")),
        load_overview=bool(settings.get_value("runtime", "load_overview_on_start")),
    )
    provider.register_observer(LoggingTreeObserver())
    settings.register_observer(LoggingSettingsObserver())
    actions = ResourceActions(invoker, provider, workspace_dir=workspace_dir)
    return invoker, provider, actions


def main() -> int:
    """Основная точка входа: готовит окружение и запускает приложение."""

    base_dir = resolve_base_dir()
    if not initialize_workdir(base_dir):
        return 1
    configure_logging(base_dir / "logs")

    settings = initialize_settings(base_dir / "config.json")
    setup_logging_from_settings(base_dir, settings)

    workspace_dir = Path.cwd()
    invoker, provider, actions = build_services(settings, workspace_dir)

    LOGGER.info("Starting Podman Manager %s", __version__)
    app = create_application(
        settings=settings,
        invoker=invoker,
        provider=provider,
        actions=actions,
        workspace_dir=workspace_dir,
    )
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
