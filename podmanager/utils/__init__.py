"""Вспомогательные утилиты: пути, логирование, системные метрики."""
