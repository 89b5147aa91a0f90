"""Модель дерева ресурсов: узлы, группировка, кэш и обновление."""
