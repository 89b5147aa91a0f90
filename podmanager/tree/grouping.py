"""Преобразование записей podman в упорядоченные списки узлов дерева."""

from __future__ import annotations

from typing import Dict, Iterable, List, Set

from podmanager.runtime.models import (
    ContainerRecord,
    ImageRecord,
    NetworkRecord,
    PodContainerRecord,
    PodRecord,
    VolumeRecord,
)
from podmanager.tree.nodes import (
    ComposeContainerNode,
    ComposeGroupNode,
    ContainerNode,
    DisplayNode,
    ImageNode,
    ImageTagNode,
    NetworkNode,
    OverviewLineNode,
    PodNode,
    VolumeNode,
)


def container_label(name: str, container_id: str) -> str:
    return f"{name} ({container_id})"


def group_compose_containers(
    records: Iterable[ContainerRecord],
) -> Dict[str, List[ContainerRecord]]:
    """Группирует compose-контейнеры по проекту в порядке первого появления."""

    groups: Dict[str, List[ContainerRecord]] = {}
    for record in records:
        if record.is_compose:
            groups.setdefault(record.compose_project, []).append(record)
    return groups


def build_container_nodes(records: Iterable[ContainerRecord]) -> List[DisplayNode]:
    """Сначала обычные контейнеры, затем пронумерованные compose-группы."""

    records = list(records)
    nodes: List[DisplayNode] = [
        ContainerNode(
            label=container_label(record.name, record.id),
            resource_id=record.id,
            status_text=record.status,
            running=record.running,
        )
        for record in records
        if not record.is_compose
    ]
    groups = group_compose_containers(records)
    for index, (project, members) in enumerate(groups.items(), start=1):
        children = tuple(
            ComposeContainerNode(
                label=container_label(member.name, member.id),
                resource_id=member.id,
                status_text=member.status,
                running=member.running,
                project_name=project,
            )
            for member in members
        )
        nodes.append(
            ComposeGroupNode(
                label=f"Compose Group {index}: {project}",
                project_name=project,
                children=children,
            )
        )
    return nodes


def _is_image_used(image_id: str, used_image_ids: Set[str]) -> bool:
    # image ls выводит короткий id, container ls может вернуть полный
    if image_id in used_image_ids:
        return True
    return any(used.startswith(image_id) for used in used_image_ids if image_id)


def build_image_nodes(
    records: Iterable[ImageRecord],
    used_image_ids: Set[str] | None = None,
) -> List[DisplayNode]:
    """Сворачивает строки с одинаковым id в один узел образа."""

    used_image_ids = used_image_ids or set()
    tags_by_id: Dict[str, List[str]] = {}
    for record in records:
        tags = tags_by_id.setdefault(record.id, [])
        if not record.has_wildcard:
            tags.append(record.reference)

    nodes: List[DisplayNode] = []
    for image_id, tags in tags_by_id.items():
        if len(tags) > 1:
            label = f"{image_id} ({len(tags)} tags)"
            children = tuple(
                ImageTagNode(label=tag, resource_id=f"{image_id}-tag-{index}", image_id=image_id)
                for index, tag in enumerate(tags)
            )
        elif tags:
            label = f"{tags[0]} ({image_id})"
            children = ()
        else:
            label = image_id
            children = ()
        nodes.append(
            ImageNode(
                label=label,
                resource_id=image_id,
                tags=tuple(tags),
                in_use=_is_image_used(image_id, used_image_ids),
                children=children,
            )
        )
    return nodes


def build_pod_nodes(records: Iterable[PodRecord]) -> List[DisplayNode]:
    return [
        PodNode(
            label=f"Pod: {record.name}",
            resource_id=record.id,
            status_text=f"Status: {record.status}\nCreated: {record.created}",
        )
        for record in records
    ]


def build_pod_container_nodes(records: Iterable[PodContainerRecord]) -> List[DisplayNode]:
    return [
        ContainerNode(
            label=container_label(record.name, record.id),
            resource_id=record.id,
            status_text=f"{record.status}\nCreated: {record.created}",
            running=record.running,
        )
        for record in records
    ]


def build_volume_nodes(records: Iterable[VolumeRecord]) -> List[DisplayNode]:
    return [
        VolumeNode(label=f"{record.name} ({record.driver})", name=record.name, driver=record.driver)
        for record in records
    ]


def build_network_nodes(records: Iterable[NetworkRecord]) -> List[DisplayNode]:
    return [
        NetworkNode(
            label=f"{record.name} ({record.driver})", name=record.name, driver=record.driver
        )
        for record in records
    ]


def build_overview_nodes(text: str) -> List[DisplayNode]:
    """Каждая непустая строка ``system df`` становится листом."""

    return [OverviewLineNode(label=line) for line in text.split("\n") if line.strip() != ""]
