"""Централизованное описание путей приложения."""

from __future__ import annotations

import os
from pathlib import Path

HOME_ENV = "PODMANAGER_HOME"


def resolve_base_dir() -> Path:
    """Базовая директория: ``$PODMANAGER_HOME/.podmanager`` либо ``~/.podmanager``."""

    home_dir = Path(os.environ.get(HOME_ENV, Path.home()))
    return home_dir / ".podmanager"


# CONFIG_DIR: директория, где сохраняются настройки и логи
CONFIG_DIR = resolve_base_dir()
