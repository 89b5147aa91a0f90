"""Переиспользуемые виджеты панели."""
