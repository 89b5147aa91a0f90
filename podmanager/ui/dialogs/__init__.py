"""Пакет диалоговых окон."""

from .container_console import ContainerConsoleDialog

__all__ = [
    "ContainerConsoleDialog",
]
