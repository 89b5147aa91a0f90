"""Podmanager: боковая панель для просмотра и управления ресурсами Podman."""

__version__ = "0.3.0"
