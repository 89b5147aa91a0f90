"""Менеджер тем: загрузка QSS и применение к приложению."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, cast

from PySide6 import QtGui, QtWidgets

from podmanager.settings.groups import ThemeSettings
from podmanager.settings.registry import SettingsRegistry


def resolve_variant(theme_choice: str) -> str:
    return "dark" if theme_choice == "dark" else "light"


def apply_theme(app: QtWidgets.QApplication, settings: SettingsRegistry) -> None:
    """Применяет визуальные настройки (цвета и шрифты)."""

    style_dir = Path(__file__).parent
    theme_variant = resolve_variant(settings.get_value("app", "theme", default="system"))
    template_path = style_dir / f"{theme_variant}_theme.qss"
    template = template_path.read_text(encoding="utf-8")

    theme_group = cast(ThemeSettings, settings.get_group("theme"))
    qss = template.format(**build_palette(theme_group, theme_variant))
    app.setStyleSheet(qss)
    _apply_font(app, theme_group)


def build_palette(theme_group: ThemeSettings, variant: str) -> Dict[str, str]:
    suffix = "dark" if variant == "dark" else "light"
    return {
        "background": theme_group.get(f"background_{suffix}"),
        "text": theme_group.get(f"text_{suffix}"),
        "selection_background": theme_group.get(f"selection_background_{suffix}"),
        "running": theme_group.get("running_color"),
        "stopped": theme_group.get("stopped_color"),
    }


def _apply_font(app: QtWidgets.QApplication, theme_group: ThemeSettings) -> None:
    """Применяет выбранные пользователем настройки шрифта."""

    current_font = app.font()
    family = theme_group.get("font_family")
    if not family:
        family = current_font.family()
    point_size = int(theme_group.get("font_size") or current_font.pointSize())
    app.setFont(QtGui.QFont(family, point_size))
