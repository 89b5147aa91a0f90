"""Записи, полученные из одной строки вывода podman."""

from __future__ import annotations

from dataclasses import dataclass

COMPOSE_PROJECT_LABEL = "com.docker.compose.project"
UNKNOWN_PROJECT = "Unknown Project"
WILDCARD = "<none>"


def is_running(status: str) -> bool:
    """Статус общего списка контейнеров: ``Up ...`` с учётом регистра."""

    return status.startswith("Up")


def is_running_in_pod(status: str) -> bool:
    """Статус участника пода: подстрока ``up`` без учёта регистра."""

    return "up" in status.lower()


def extract_compose_project(labels: str) -> str:
    """Извлекает имя compose-проекта из строки меток ``k=v,k=v``."""

    prefix = f"{COMPOSE_PROJECT_LABEL}="
    for label in labels.split(","):
        label = label.strip()
        if label.startswith(prefix):
            return label.split("=")[1] or UNKNOWN_PROJECT
    return UNKNOWN_PROJECT


@dataclass(frozen=True, slots=True)
class ContainerRecord:
    """Строка ``container ls -a``."""

    id: str
    name: str
    status: str
    labels: str = ""

    @property
    def running(self) -> bool:
        return is_running(self.status)

    @property
    def is_compose(self) -> bool:
        return COMPOSE_PROJECT_LABEL in self.labels

    @property
    def compose_project(self) -> str:
        return extract_compose_project(self.labels) if self.is_compose else ""


@dataclass(frozen=True, slots=True)
class PodContainerRecord:
    """Строка ``ps --filter pod=<id>``."""

    id: str
    name: str
    status: str
    created: str = ""

    @property
    def running(self) -> bool:
        return is_running_in_pod(self.status)


@dataclass(frozen=True, slots=True)
class ImageRecord:
    """Строка ``image ls``; один id может встречаться несколько раз."""

    id: str
    repository: str
    tag: str

    @property
    def has_wildcard(self) -> bool:
        return self.repository == WILDCARD or self.tag == WILDCARD

    @property
    def reference(self) -> str:
        return f"{self.repository}:{self.tag}"


@dataclass(frozen=True, slots=True)
class VolumeRecord:
    name: str
    driver: str = ""


@dataclass(frozen=True, slots=True)
class NetworkRecord:
    name: str
    driver: str = ""


@dataclass(frozen=True, slots=True)
class PodRecord:
    """Строка ``pod ps``."""

    name: str
    status: str
    created: str
    id: str


@dataclass(frozen=True, slots=True)
class MachineRecord:
    """Строка ``machine list``."""

    name: str
    running: str = ""

    @property
    def is_running(self) -> bool:
        return self.running.strip() in {"Running", "true"}
