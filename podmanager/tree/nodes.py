"""Узлы дерева ресурсов: по одному классу на каждый вид узла.

Каждый класс хранит только нужные ему поля. Общие для всех узлов свойства:
``label``, ``kind``, ``expandable``, ``children`` и ``cache_key``. Дочерние узлы
есть только у корней, compose-групп, подов и образов с несколькими тегами.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional, Tuple, Union


class NodeKind(str, Enum):
    """Тип узла; значение совпадает с ключом кэша для корней."""

    CONTAINERS_ROOT = "containers-root"
    PODS_ROOT = "pods-root"
    IMAGES_ROOT = "images-root"
    VOLUMES_ROOT = "volumes-root"
    NETWORKS_ROOT = "networks-root"
    OVERVIEW_ROOT = "overview-root"
    CONTAINER = "container"
    COMPOSE_GROUP = "compose-group"
    COMPOSE_CONTAINER = "compose-container"
    POD = "pod"
    IMAGE = "image"
    IMAGE_TAG = "image-tag"
    VOLUME = "volume"
    NETWORK = "network"
    OVERVIEW_LINE = "overview-line"

    @property
    def is_root(self) -> bool:
        return self.value.endswith("-root")


ROOT_KINDS: Tuple[NodeKind, ...] = (
    NodeKind.CONTAINERS_ROOT,
    NodeKind.PODS_ROOT,
    NodeKind.IMAGES_ROOT,
    NodeKind.VOLUMES_ROOT,
    NodeKind.NETWORKS_ROOT,
    NodeKind.OVERVIEW_ROOT,
)


@dataclass(frozen=True, slots=True)
class CategoryNode:
    """Корневая категория (Containers, Pods, ...)."""

    label: str
    kind: NodeKind

    expandable: ClassVar[bool] = True
    children: ClassVar[Tuple["DisplayNode", ...]] = ()

    def __post_init__(self) -> None:
        if not self.kind.is_root:
            raise ValueError(f"{self.kind.value} is not a root kind")

    @property
    def cache_key(self) -> str:
        return self.kind.value

    @property
    def tooltip(self) -> Optional[str]:
        return None


@dataclass(frozen=True, slots=True)
class ContainerNode:
    """Контейнер вне compose-проекта или участник пода."""

    label: str
    resource_id: str
    status_text: str
    running: bool

    kind: ClassVar[NodeKind] = NodeKind.CONTAINER
    expandable: ClassVar[bool] = False
    children: ClassVar[Tuple["DisplayNode", ...]] = ()

    @property
    def cache_key(self) -> str:
        return self.kind.value

    @property
    def tooltip(self) -> Optional[str]:
        return f"ID: {self.resource_id}\nStatus: {self.status_text}"


@dataclass(frozen=True, slots=True)
class ComposeContainerNode:
    """Контейнер, принадлежащий compose-проекту."""

    label: str
    resource_id: str
    status_text: str
    running: bool
    project_name: str

    kind: ClassVar[NodeKind] = NodeKind.COMPOSE_CONTAINER
    expandable: ClassVar[bool] = False
    children: ClassVar[Tuple["DisplayNode", ...]] = ()

    @property
    def cache_key(self) -> str:
        return self.kind.value

    @property
    def tooltip(self) -> Optional[str]:
        return f"ID: {self.resource_id}\nStatus: {self.status_text}"


@dataclass(frozen=True, slots=True)
class ComposeGroupNode:
    """Синтетический родитель для контейнеров одного compose-проекта."""

    label: str
    project_name: str
    children: Tuple[ComposeContainerNode, ...] = ()

    kind: ClassVar[NodeKind] = NodeKind.COMPOSE_GROUP
    expandable: ClassVar[bool] = True
    expanded: ClassVar[bool] = True

    @property
    def cache_key(self) -> str:
        return f"{self.kind.value}:{self.project_name}"

    @property
    def tooltip(self) -> Optional[str]:
        return None


@dataclass(frozen=True, slots=True)
class PodNode:
    """Под; участники загружаются лениво при раскрытии."""

    label: str
    resource_id: str
    status_text: str

    kind: ClassVar[NodeKind] = NodeKind.POD
    expandable: ClassVar[bool] = True
    children: ClassVar[Tuple["DisplayNode", ...]] = ()

    @property
    def cache_key(self) -> str:
        return f"{self.kind.value}:{self.resource_id}"

    @property
    def tooltip(self) -> Optional[str]:
        return self.status_text


@dataclass(frozen=True, slots=True)
class ImageTagNode:
    """Один ``repository:tag`` образа с несколькими тегами."""

    label: str
    resource_id: str
    image_id: str

    kind: ClassVar[NodeKind] = NodeKind.IMAGE_TAG
    expandable: ClassVar[bool] = False
    children: ClassVar[Tuple["DisplayNode", ...]] = ()

    @property
    def cache_key(self) -> str:
        return self.kind.value

    @property
    def tooltip(self) -> Optional[str]:
        return self.image_id


@dataclass(frozen=True, slots=True)
class ImageNode:
    """Образ; с несколькими тегами раскрывается в список тегов."""

    label: str
    resource_id: str
    tags: Tuple[str, ...] = ()
    in_use: bool = False
    children: Tuple[ImageTagNode, ...] = field(default=())

    kind: ClassVar[NodeKind] = NodeKind.IMAGE

    @property
    def expandable(self) -> bool:
        return len(self.tags) > 1

    @property
    def cache_key(self) -> str:
        return f"{self.kind.value}:{self.resource_id}"

    @property
    def tooltip(self) -> Optional[str]:
        return self.resource_id


@dataclass(frozen=True, slots=True)
class VolumeNode:
    label: str
    name: str
    driver: str

    kind: ClassVar[NodeKind] = NodeKind.VOLUME
    expandable: ClassVar[bool] = False
    children: ClassVar[Tuple["DisplayNode", ...]] = ()

    @property
    def cache_key(self) -> str:
        return self.kind.value

    @property
    def tooltip(self) -> Optional[str]:
        return None


@dataclass(frozen=True, slots=True)
class NetworkNode:
    label: str
    name: str
    driver: str

    kind: ClassVar[NodeKind] = NodeKind.NETWORK
    expandable: ClassVar[bool] = False
    children: ClassVar[Tuple["DisplayNode", ...]] = ()

    @property
    def cache_key(self) -> str:
        return self.kind.value

    @property
    def tooltip(self) -> Optional[str]:
        return None


@dataclass(frozen=True, slots=True)
class OverviewLineNode:
    """Одна строка вывода ``system df``."""

    label: str

    kind: ClassVar[NodeKind] = NodeKind.OVERVIEW_LINE
    expandable: ClassVar[bool] = False
    children: ClassVar[Tuple["DisplayNode", ...]] = ()

    @property
    def cache_key(self) -> str:
        return self.kind.value

    @property
    def tooltip(self) -> Optional[str]:
        return None


DisplayNode = Union[
    CategoryNode,
    ContainerNode,
    ComposeGroupNode,
    ComposeContainerNode,
    PodNode,
    ImageNode,
    ImageTagNode,
    VolumeNode,
    NetworkNode,
    OverviewLineNode,
]
