"""Виджет дерева ресурсов: ленивая загрузка веток и контекстное меню."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Set

from PySide6 import QtCore, QtGui, QtWidgets

from podmanager.i18n.translator import translate
from podmanager.tree.nodes import (
    ComposeContainerNode,
    ComposeGroupNode,
    ContainerNode,
    DisplayNode,
    ImageNode,
)
from podmanager.tree.provider import ResourceTreeProvider
from podmanager.ui.workers import TaskThread

LOGGER = logging.getLogger(__name__)

NODE_ROLE = QtCore.Qt.ItemDataRole.UserRole
LOADED_ROLE = QtCore.Qt.ItemDataRole.UserRole + 1


@dataclass(slots=True)
class NodeAction:
    """Пункт контекстного меню для узла."""

    label: str
    callback: Callable[[DisplayNode], None]


MenuBuilder = Callable[[DisplayNode], Sequence[NodeAction]]


class TreeSignalBridge(QtCore.QObject):
    """Переносит события провайдера из потока таймера в GUI-поток."""

    tree_changed = QtCore.Signal()
    fetch_failed = QtCore.Signal(str, str)

    def on_tree_changed(self) -> None:
        self.tree_changed.emit()

    def on_fetch_error(self, cache_key: str, message: str) -> None:
        self.fetch_failed.emit(cache_key, message)


class ResourceTreeWidget(QtWidgets.QWidget):
    """Отображает узлы ``ResourceTreeProvider`` в ``QTreeWidget``."""

    def __init__(
        self,
        provider: ResourceTreeProvider,
        *,
        menu_builder: MenuBuilder | None = None,
        running_color: str = "#2e9d4f",
        stopped_color: str = "#c01547",
        parent: QtWidgets.QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._provider = provider
        self._menu_builder = menu_builder
        self._running_brush = QtGui.QBrush(QtGui.QColor(running_color))
        self._stopped_brush = QtGui.QBrush(QtGui.QColor(stopped_color))
        self._epoch = 0
        self._workers: Set[TaskThread] = set()
        self._expanded_keys: Set[str] = set()
        self._setup_ui()

    # ------------------------------------------------------------------ setup
    def _setup_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self._tree = QtWidgets.QTreeWidget()
        self._tree.setHeaderHidden(True)
        self._tree.setUniformRowHeights(True)
        self._tree.setSelectionMode(QtWidgets.QAbstractItemView.SelectionMode.SingleSelection)
        self._tree.setContextMenuPolicy(QtCore.Qt.ContextMenuPolicy.CustomContextMenu)
        self._tree.customContextMenuRequested.connect(self._show_context_menu)
        self._tree.itemExpanded.connect(self._on_item_expanded)
        self._tree.itemCollapsed.connect(self._on_item_collapsed)
        layout.addWidget(self._tree)

    @property
    def tree(self) -> QtWidgets.QTreeWidget:
        return self._tree

    # ----------------------------------------------------------------- data api
    def reload(self) -> None:
        """Перестраивает дерево с корней; раскрытые ветки раскрываются снова."""

        self._epoch += 1
        self._tree.clear()
        for node in self._provider.get_root_nodes():
            item = self._create_item(node, None)
            if node.cache_key in self._expanded_keys:
                item.setExpanded(True)

    def current_node(self) -> Optional[DisplayNode]:
        item = self._tree.currentItem()
        if item is None:
            return None
        return self._node_of(item)

    def shutdown(self) -> None:
        for worker in list(self._workers):
            worker.requestInterruption()
            worker.wait(1000)
        self._workers.clear()

    # --------------------------------------------------------------- rendering
    def _create_item(
        self,
        node: DisplayNode,
        parent: QtWidgets.QTreeWidgetItem | None,
    ) -> QtWidgets.QTreeWidgetItem:
        if parent is None:
            item = QtWidgets.QTreeWidgetItem(self._tree, [self._label(node)])
        else:
            item = QtWidgets.QTreeWidgetItem(parent, [self._label(node)])
        item.setData(0, NODE_ROLE, node)
        item.setData(0, LOADED_ROLE, False)
        tooltip = node.tooltip
        if tooltip:
            item.setToolTip(0, tooltip)
        if isinstance(node, (ContainerNode, ComposeContainerNode)):
            item.setForeground(0, self._running_brush if node.running else self._stopped_brush)
        if node.expandable:
            item.setChildIndicatorPolicy(
                QtWidgets.QTreeWidgetItem.ChildIndicatorPolicy.ShowIndicator
            )
        return item

    @staticmethod
    def _label(node: DisplayNode) -> str:
        if isinstance(node, ImageNode) and node.in_use:
            return f"{node.label}  [{translate('tree.in_use')}]"
        return node.label

    @staticmethod
    def _node_of(item: QtWidgets.QTreeWidgetItem) -> Optional[DisplayNode]:
        return item.data(0, NODE_ROLE)

    def _set_placeholder(self, item: QtWidgets.QTreeWidgetItem, text: str) -> None:
        placeholder = QtWidgets.QTreeWidgetItem(item, [text])
        placeholder.setFlags(QtCore.Qt.ItemFlag.ItemIsEnabled)
        font = placeholder.font(0)
        font.setItalic(True)
        placeholder.setFont(0, font)

    def _populate(self, item: QtWidgets.QTreeWidgetItem, children: Sequence[DisplayNode]) -> None:
        item.takeChildren()
        item.setData(0, LOADED_ROLE, True)
        if not children:
            self._set_placeholder(item, translate("tree.empty"))
            return
        for child in children:
            child_item = self._create_item(child, item)
            if isinstance(child, ComposeGroupNode) and child.expanded:
                child_item.setExpanded(True)
            elif child.cache_key in self._expanded_keys:
                child_item.setExpanded(True)

    # ------------------------------------------------------------- expansion
    def _on_item_expanded(self, item: QtWidgets.QTreeWidgetItem) -> None:
        node = self._node_of(item)
        if node is None:
            return
        self._expanded_keys.add(node.cache_key)
        if item.data(0, LOADED_ROLE):
            return
        if node.children or not node.expandable:
            self._populate(item, self._provider.get_children(node))
            return
        self._load_async(item, node)

    def _on_item_collapsed(self, item: QtWidgets.QTreeWidgetItem) -> None:
        node = self._node_of(item)
        if node is not None:
            self._expanded_keys.discard(node.cache_key)

    def _load_async(self, item: QtWidgets.QTreeWidgetItem, node: DisplayNode) -> None:
        item.takeChildren()
        self._set_placeholder(item, translate("tree.loading"))
        epoch = self._epoch
        worker = TaskThread(lambda: self._provider.get_children(node), name=node.cache_key)

        def on_ready(children: object) -> None:
            if epoch != self._epoch:
                return
            self._populate(item, list(children))  # type: ignore[call-overload]

        worker.result_ready.connect(on_ready)
        worker.finished.connect(lambda w=worker: self._workers.discard(w))
        worker.finished.connect(worker.deleteLater)
        self._workers.add(worker)
        worker.start()

    # ------------------------------------------------------------ context menu
    def _show_context_menu(self, position: QtCore.QPoint) -> None:
        item = self._tree.itemAt(position)
        if item is None or self._menu_builder is None:
            return
        node = self._node_of(item)
        if node is None:
            return
        actions = list(self._menu_builder(node))
        if not actions:
            return
        menu = QtWidgets.QMenu(self)
        callbacks: Dict[QtGui.QAction, Callable[[DisplayNode], None]] = {}
        for action in actions:
            callbacks[menu.addAction(action.label)] = action.callback
        chosen = menu.exec(self._tree.viewport().mapToGlobal(position))
        if chosen is not None and chosen in callbacks:
            callbacks[chosen](node)

