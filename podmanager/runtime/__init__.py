"""Слой вызова внешнего CLI Podman и разбора его текстового вывода."""
