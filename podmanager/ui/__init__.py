"""PySide6-хост дерева ресурсов."""
