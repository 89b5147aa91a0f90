"""Аргументы подкоманд podman и podman-compose.

Все списковые команды выводят поля через разделитель ``|`` (см. ``FIELD_DELIMITER``).
"""

from __future__ import annotations

from typing import List, Optional

FIELD_DELIMITER = "|"

LIST_MACHINES = 'machine list --format "{{.Name}}|{{.Running}}"'
LIST_CONTAINERS = 'container ls -a --format "{{.ID}}|{{.Names}}|{{.Status}}|{{.Labels}}"'
LIST_CONTAINER_IMAGE_IDS = 'container ls -a --format "{{.ImageID}}"'
LIST_IMAGES = 'image ls --format "{{.ID}}|{{.Repository}}|{{.Tag}}"'
LIST_VOLUMES = 'volume ls --format "{{.Name}}|{{.Driver}}"'
LIST_NETWORKS = 'network ls --format "{{.Name}}|{{.Driver}}"'
LIST_PODS = 'pod ps --format "{{.Name}}|{{.Status}}|{{.Created}}|{{.Id}}"'
SYSTEM_DF = "system df"
MACHINE_START = "machine start"

CONTAINER_ACTIONS = ("start", "stop", "restart")
COMPOSE_ACTIONS = {
    "up": "up -d",
    "start": "start",
    "stop": "stop",
    "restart": "restart",
    "down": "down",
}


def list_pod_containers(pod_id: str) -> str:
    return (
        f'ps --filter "pod={pod_id}" '
        '--format "{{.ID}}|{{.Names}}|{{.Status}}|{{.CreatedAt}}"'
    )


def container_action(action: str, container_id: str) -> str:
    """Возвращает ``container start|stop|restart <id>``."""

    if action not in CONTAINER_ACTIONS:
        raise ValueError(f"Unknown container action: {action}")
    return f"container {action} {container_id}"


def remove_container(container_id: str) -> str:
    return f"container rm -f {container_id}"


def remove_image(image_id: str) -> str:
    return f"image rm -f {image_id}"


def remove_volume(name: str) -> str:
    return f"volume rm -f {name}"


def remove_network(name: str) -> str:
    return f"network rm -f {name}"


def exec_shell(container_id: str, shell_parts: List[str]) -> List[str]:
    """Аргументы для интерактивного ``exec -it``."""

    return ["exec", "-it", container_id, *(shell_parts or ["/bin/sh"])]


def compose(
    action: str,
    *,
    compose_file: Optional[str] = None,
    project: Optional[str] = None,
) -> str:
    """Собирает аргументы podman-compose; файл приоритетнее имени проекта."""

    try:
        subcommand = COMPOSE_ACTIONS[action]
    except KeyError:
        raise ValueError(f"Unknown compose action: {action}") from None
    if compose_file:
        return f'-f "{compose_file}" {subcommand}'
    if project:
        return f'-p "{project}" {subcommand}'
    raise ValueError("Compose file or project name is required")
