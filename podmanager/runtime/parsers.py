"""Разбор текстового вывода podman с разделителем ``|`` в записи."""

from __future__ import annotations

from typing import Callable, List, TypeVar

from podmanager.runtime.commands import FIELD_DELIMITER
from podmanager.runtime.models import (
    ContainerRecord,
    ImageRecord,
    MachineRecord,
    NetworkRecord,
    PodContainerRecord,
    PodRecord,
    VolumeRecord,
)

RecordT = TypeVar("RecordT")


def split_lines(output: str) -> List[str]:
    """Строки вывода без пустых."""

    return [line for line in output.split("\n") if line.strip() != ""]


def split_fields(line: str, count: int) -> List[str]:
    """Делит строку на ``count`` позиционных полей, недостающие пустые."""

    fields = line.rstrip("\r").split(FIELD_DELIMITER)
    if len(fields) < count:
        fields.extend([""] * (count - len(fields)))
    return fields[:count]


def _parse(output: str, count: int, factory: Callable[..., RecordT]) -> List[RecordT]:
    return [factory(*split_fields(line, count)) for line in split_lines(output)]


def parse_containers(output: str) -> List[ContainerRecord]:
    return _parse(output, 4, ContainerRecord)


def parse_pod_containers(output: str) -> List[PodContainerRecord]:
    return _parse(output, 4, PodContainerRecord)


def parse_images(output: str) -> List[ImageRecord]:
    return _parse(output, 3, ImageRecord)


def parse_volumes(output: str) -> List[VolumeRecord]:
    return _parse(output, 2, VolumeRecord)


def parse_networks(output: str) -> List[NetworkRecord]:
    return _parse(output, 2, NetworkRecord)


def parse_pods(output: str) -> List[PodRecord]:
    return _parse(output, 4, PodRecord)


def parse_machines(output: str) -> List[MachineRecord]:
    return _parse(output, 2, MachineRecord)


def parse_image_ids(output: str) -> set[str]:
    """Множество id образов, на которые ссылаются контейнеры."""

    return {line.strip() for line in split_lines(output)}
