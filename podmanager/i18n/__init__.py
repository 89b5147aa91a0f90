"""Переводы строк интерфейса."""
