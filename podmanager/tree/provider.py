"""Источник данных дерева: загрузка веток через podman, кэш и обновление."""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from podmanager.runtime import commands, parsers
from podmanager.runtime.exceptions import CLIInvocationError
from podmanager.runtime.invoker import CLIInvoker
from podmanager.tree import grouping
from podmanager.tree.debounce import Debouncer, TimerFactory
from podmanager.tree.nodes import (
    ROOT_KINDS,
    CategoryNode,
    DisplayNode,
    NodeKind,
    PodNode,
)
from podmanager.tree.observers import TreeObserver

LOGGER = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 300

ROOT_LABELS: Dict[NodeKind, str] = {
    NodeKind.CONTAINERS_ROOT: "Containers",
    NodeKind.PODS_ROOT: "Pods",
    NodeKind.IMAGES_ROOT: "Images",
    NodeKind.VOLUMES_ROOT: "Volumes",
    NodeKind.NETWORKS_ROOT: "Networks",
    NodeKind.OVERVIEW_ROOT: "Overview",
}

Children = Tuple[DisplayNode, ...]


class CacheState(str, Enum):
    """Состояние ветки дерева в кэше."""

    UNCACHED = "uncached"
    FETCHING = "fetching"
    CACHED = "cached"


class ResourceTreeProvider:
    """Строит узлы дерева по запросу хоста и кэширует их до обновления.

    Кэш сбрасывается только целиком: ``refresh`` откладывается на
    ``debounce_ms`` и серия вызовов внутри окна даёт одно событие
    ``on_tree_changed``. Загрузка, начатая до сброса, в кэш не попадает.
    """

    def __init__(
        self,
        invoker: CLIInvoker,
        *,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        timer_factory: TimerFactory = threading.Timer,
        load_overview: bool = False,
    ) -> None:
        self._invoker = invoker
        self._lock = threading.RLock()
        self._cache: Dict[str, Children] = {}
        self._fetching: Dict[str, int] = {}
        self._generation = 0
        self._overview_text = ""
        self._observers: List[TreeObserver] = []
        self._debouncer = Debouncer(debounce_ms, self._invalidate, timer_factory=timer_factory)
        self._fetchers: Dict[NodeKind, Callable[[], List[DisplayNode]]] = {
            NodeKind.CONTAINERS_ROOT: self._fetch_containers,
            NodeKind.PODS_ROOT: self._fetch_pods,
            NodeKind.IMAGES_ROOT: self._fetch_images,
            NodeKind.VOLUMES_ROOT: self._fetch_volumes,
            NodeKind.NETWORKS_ROOT: self._fetch_networks,
            NodeKind.OVERVIEW_ROOT: self._overview_nodes,
        }
        if load_overview:
            self.refresh_overview()

    # ----------------------------------------------------------------- observers
    def register_observer(self, observer: TreeObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unregister_observer(self, observer: TreeObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _notify_changed(self) -> None:
        for observer in list(self._observers):
            try:
                observer.on_tree_changed()
            except Exception as exc:  # pragma: no cover
                LOGGER.error("Observer %s failed: %s", observer, exc, exc_info=True)

    def _notify_error(self, cache_key: str, message: str) -> None:
        for observer in list(self._observers):
            try:
                observer.on_fetch_error(cache_key, message)
            except Exception as exc:  # pragma: no cover
                LOGGER.error("Observer %s failed: %s", observer, exc, exc_info=True)

    # ---------------------------------------------------------------------- API
    @property
    def overview_text(self) -> str:
        return self._overview_text

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def get_root_nodes(self) -> Children:
        """Фиксированный набор корневых категорий."""

        return tuple(CategoryNode(label=ROOT_LABELS[kind], kind=kind) for kind in ROOT_KINDS)

    def get_children(self, node: Optional[DisplayNode] = None) -> Children:
        """Возвращает дочерние узлы; ``None`` означает корень дерева."""

        if node is None:
            return self.get_root_nodes()
        if isinstance(node, CategoryNode):
            return self._cached(node.cache_key, self._fetchers[node.kind])
        if isinstance(node, PodNode):
            return self._cached(
                node.cache_key, lambda: self._fetch_pod_containers(node.resource_id)
            )
        return tuple(node.children)

    def cache_state(self, cache_key: str) -> CacheState:
        with self._lock:
            if cache_key in self._cache:
                return CacheState.CACHED
            if self._fetching.get(cache_key):
                return CacheState.FETCHING
            return CacheState.UNCACHED

    def refresh(self) -> None:
        """Планирует сброс кэша и уведомление подписчиков."""

        self._debouncer.trigger()

    def refresh_overview(self) -> None:
        """Перечитывает ``system df`` и планирует обновление дерева."""

        try:
            result = self._invoker.run_runtime(commands.SYSTEM_DF)
        except CLIInvocationError as exc:
            LOGGER.error("Failed to fetch system overview: %s", exc.message)
            self._notify_error(NodeKind.OVERVIEW_ROOT.value, exc.message)
            return
        self._overview_text = result.stdout
        self.refresh()

    def flush(self) -> None:
        """Немедленно выполняет отложенное обновление, если оно запланировано."""

        self._debouncer.flush()

    def shutdown(self) -> None:
        self._debouncer.cancel()

    # ------------------------------------------------------------------- cache
    def _invalidate(self) -> None:
        with self._lock:
            self._cache.clear()
            self._fetching.clear()
            self._generation += 1
        LOGGER.debug("Tree cache cleared (generation %s)", self._generation)
        self._notify_changed()

    def _cached(self, cache_key: str, fetch: Callable[[], Sequence[DisplayNode]]) -> Children:
        with self._lock:
            cached = self._cache.get(cache_key)
            if cached is not None:
                return cached
            generation = self._generation
            self._fetching[cache_key] = self._fetching.get(cache_key, 0) + 1

        try:
            children = tuple(fetch())
        except CLIInvocationError as exc:
            LOGGER.error("Cannot load %s: %s", cache_key, exc.message)
            self._notify_error(cache_key, exc.message)
            return ()
        finally:
            with self._lock:
                if generation == self._generation:
                    remaining = self._fetching.get(cache_key, 1) - 1
                    if remaining > 0:
                        self._fetching[cache_key] = remaining
                    else:
                        self._fetching.pop(cache_key, None)

        with self._lock:
            if generation == self._generation:
                self._cache[cache_key] = children
            else:
                LOGGER.debug("Discarding stale result for %s", cache_key)
        return children

    # ----------------------------------------------------------------- fetches
    def _fetch_containers(self) -> List[DisplayNode]:
        result = self._invoker.run_runtime(commands.LIST_CONTAINERS)
        return grouping.build_container_nodes(parsers.parse_containers(result.stdout))

    def _fetch_pods(self) -> List[DisplayNode]:
        result = self._invoker.run_runtime(commands.LIST_PODS)
        return grouping.build_pod_nodes(parsers.parse_pods(result.stdout))

    def _fetch_images(self) -> List[DisplayNode]:
        images = self._invoker.run_runtime(commands.LIST_IMAGES)
        used = self._invoker.run_runtime(commands.LIST_CONTAINER_IMAGE_IDS)
        return grouping.build_image_nodes(
            parsers.parse_images(images.stdout),
            parsers.parse_image_ids(used.stdout),
        )

    def _fetch_volumes(self) -> List[DisplayNode]:
        result = self._invoker.run_runtime(commands.LIST_VOLUMES)
        return grouping.build_volume_nodes(parsers.parse_volumes(result.stdout))

    def _fetch_networks(self) -> List[DisplayNode]:
        result = self._invoker.run_runtime(commands.LIST_NETWORKS)
        return grouping.build_network_nodes(parsers.parse_networks(result.stdout))

    def _fetch_pod_containers(self, pod_id: str) -> List[DisplayNode]:
        result = self._invoker.run_runtime(commands.list_pod_containers(pod_id))
        return grouping.build_pod_container_nodes(parsers.parse_pod_containers(result.stdout))

    def _overview_nodes(self) -> List[DisplayNode]:
        return grouping.build_overview_nodes(self._overview_text)
