"""Дефолтная схема config.json."""

from __future__ import annotations

from typing import Any, Dict

# DEFAULT_CONFIG служит шаблоном для начального config.json
DEFAULT_CONFIG: Dict[str, Any] = {
    "version": "1.0.0",
    "schema_version": 1,
    "runtime": {
        "podman_path": "",
        "compose_path": "podman-compose",
        "refresh_debounce_ms": 300,
        "load_overview_on_start": True,
    },
    "app": {
        "language": "en",
        "theme": "system",
    },
    "logging": {
        "enabled": True,
        "level": "INFO",
        "max_file_size_mb": 10,
        "max_archived_files": 5,
    },
    "terminal": {
        "container_shell": "/bin/sh",
    },
}
