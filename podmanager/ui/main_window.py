"""Главное окно панели: дерево ресурсов podman, панель действий и футер."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, List, Optional, Set

import psutil
from PySide6 import QtCore, QtGui, QtWidgets

from podmanager.actions import ActionResult, ResourceActions, find_compose_file
from podmanager.i18n.translator import translate
from podmanager.runtime.exceptions import PodmanagerError
from podmanager.runtime.invoker import CLIInvoker
from podmanager.settings.exceptions import SettingsError
from podmanager.settings.observers import RuntimePathObserver
from podmanager.settings.registry import SettingsRegistry
from podmanager.tree.nodes import (
    ComposeContainerNode,
    ComposeGroupNode,
    ContainerNode,
    DisplayNode,
    ImageNode,
    ImageTagNode,
    NetworkNode,
    VolumeNode,
)
from podmanager.tree.provider import ResourceTreeProvider
from podmanager.ui.dialogs.container_console import ContainerConsoleDialog
from podmanager.ui.widgets.footer import FooterWidget
from podmanager.ui.widgets.resource_tree import NodeAction, ResourceTreeWidget, TreeSignalBridge
from podmanager.ui.workers import TaskThread
from podmanager.utils.system_metrics import read_host_metrics

SYSTEM_METRICS_INTERVAL_MS = 5000


class MainWindow(QtWidgets.QMainWindow):
    """Боковая панель с деревом ресурсов podman."""

    def __init__(
        self,
        *,
        settings: SettingsRegistry,
        invoker: CLIInvoker,
        provider: ResourceTreeProvider,
        actions: ResourceActions,
        workspace_dir: Path,
    ) -> None:
        super().__init__()
        self._logger = logging.getLogger(__name__)
        self._settings = settings
        self._invoker = invoker
        self._provider = provider
        self._actions = actions
        self._workspace_dir = workspace_dir
        self._workers: Set[TaskThread] = set()
        self._consoles: List[ContainerConsoleDialog] = []

        theme_group = settings.get_group("theme")
        self._tree_widget = ResourceTreeWidget(
            provider,
            menu_builder=self._build_node_menu,
            running_color=theme_group.get("running_color"),
            stopped_color=theme_group.get("stopped_color"),
        )
        self._footer = FooterWidget()
        self._status_label = QtWidgets.QLabel(translate("status.ready"))

        self._bridge = TreeSignalBridge(self)
        self._bridge.tree_changed.connect(self._on_tree_changed)
        self._bridge.fetch_failed.connect(self._on_fetch_failed)
        self._provider.register_observer(self._bridge)

        self._runtime_observer = RuntimePathObserver(self._on_runtime_paths_changed)
        self._settings.register_observer(self._runtime_observer)

        self._system_metrics_timer = QtCore.QTimer(self)
        self._system_metrics_timer.timeout.connect(self._update_system_metrics)

        self._setup_window()
        self._create_toolbar()
        self._create_status_bar()
        self._tree_widget.reload()
        self._update_machine_status()
        self._start_system_metrics_timer()

    # ------------------------------------------------------------------- setup
    def _setup_window(self) -> None:
        self.setWindowTitle(translate("app.title"))
        self.setMinimumSize(240, 320)
        self.resize(
            int(self._settings.get_value("app", "window_width", default=420)),
            int(self._settings.get_value("app", "window_height", default=800)),
        )
        central = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._tree_widget, stretch=1)
        layout.addWidget(self._footer)
        self.setCentralWidget(central)

    def _create_toolbar(self) -> None:
        toolbar = self.addToolBar("main")
        toolbar.setMovable(False)

        refresh_action = toolbar.addAction(translate("actions.refresh"))
        refresh_action.setShortcut(QtGui.QKeySequence.StandardKey.Refresh)
        refresh_action.triggered.connect(self._provider.refresh)

        overview_action = toolbar.addAction(translate("actions.refresh_overview"))
        overview_action.triggered.connect(self._refresh_overview)

        compose_action = toolbar.addAction(translate("actions.compose_up"))
        compose_action.triggered.connect(self._compose_up)

        machine_action = toolbar.addAction(translate("actions.start_machine"))
        machine_action.triggered.connect(self._start_machine)

        podman_path_action = toolbar.addAction(translate("actions.podman_path"))
        podman_path_action.triggered.connect(self._edit_podman_path)

        exit_action = QtGui.QAction(translate("actions.exit"), self)
        exit_action.setShortcut(QtGui.QKeySequence.StandardKey.Quit)
        exit_action.triggered.connect(self.close)
        self.addAction(exit_action)

    def _create_status_bar(self) -> None:
        self.statusBar().addPermanentWidget(self._status_label)

    # ------------------------------------------------------------- tree events
    def _on_tree_changed(self) -> None:
        self._tree_widget.reload()
        timestamp = datetime.now().strftime("%H:%M:%S")
        self._status_label.setText(translate("status.refreshed").format(timestamp=timestamp))

    def _on_fetch_failed(self, cache_key: str, message: str) -> None:
        text = translate("messages.load_failed").format(section=cache_key, message=message)
        self.statusBar().showMessage(text, 10000)

    def _on_runtime_paths_changed(self) -> None:
        self._logger.info("Runtime executable changed, refreshing tree")
        self._provider.refresh()

    # --------------------------------------------------------------- node menu
    def _build_node_menu(self, node: DisplayNode) -> List[NodeAction]:
        """Формирует пункты контекстного меню по виду узла."""

        items: List[NodeAction] = []
        if isinstance(node, (ContainerNode, ComposeContainerNode)):
            items.extend(
                [
                    NodeAction(translate("actions.start_container"), self._start_container),
                    NodeAction(translate("actions.stop_container"), self._stop_container),
                    NodeAction(translate("actions.restart_container"), self._restart_container),
                    NodeAction(translate("actions.open_shell"), self._open_shell),
                    NodeAction(translate("actions.delete_container"), self._delete_container),
                ]
            )
        if isinstance(node, (ComposeGroupNode, ComposeContainerNode)):
            items.extend(
                [
                    NodeAction(translate("actions.compose_start"), self._compose_start),
                    NodeAction(translate("actions.compose_stop"), self._compose_stop),
                    NodeAction(translate("actions.compose_restart"), self._compose_restart),
                    NodeAction(translate("actions.compose_down"), self._compose_down),
                ]
            )
        if isinstance(node, (ImageNode, ImageTagNode)):
            items.append(NodeAction(translate("actions.delete_image"), self._delete_image))
        if isinstance(node, VolumeNode):
            items.append(NodeAction(translate("actions.delete_volume"), self._delete_volume))
        if isinstance(node, NetworkNode):
            items.append(NodeAction(translate("actions.delete_network"), self._delete_network))
        return items

    def _start_container(self, node: DisplayNode) -> None:
        self._run_action(lambda: self._actions.start_container(node))

    def _stop_container(self, node: DisplayNode) -> None:
        self._run_action(lambda: self._actions.stop_container(node))

    def _restart_container(self, node: DisplayNode) -> None:
        self._run_action(lambda: self._actions.restart_container(node))

    def _delete_container(self, node: DisplayNode) -> None:
        if self._confirm(translate("messages.confirm_delete").format(name=node.label)):
            self._run_action(lambda: self._actions.delete_container(node))

    def _delete_image(self, node: DisplayNode) -> None:
        if self._confirm(translate("messages.confirm_delete").format(name=node.label)):
            self._run_action(lambda: self._actions.delete_image(node))

    def _delete_volume(self, node: DisplayNode) -> None:
        if self._confirm(translate("messages.confirm_delete").format(name=node.label)):
            self._run_action(lambda: self._actions.delete_volume(node))

    def _delete_network(self, node: DisplayNode) -> None:
        if self._confirm(translate("messages.confirm_delete").format(name=node.label)):
            self._run_action(lambda: self._actions.delete_network(node))

    def _compose_start(self, node: DisplayNode) -> None:
        self._run_action(lambda: self._actions.compose_start(node))

    def _compose_stop(self, node: DisplayNode) -> None:
        self._run_action(lambda: self._actions.compose_stop(node))

    def _compose_restart(self, node: DisplayNode) -> None:
        self._run_action(lambda: self._actions.compose_restart(node))

    def _compose_down(self, node: DisplayNode) -> None:
        if not isinstance(node, (ComposeGroupNode, ComposeContainerNode)):
            return
        question = translate("messages.confirm_compose_down").format(project=node.project_name)
        if self._confirm(question):
            self._run_action(lambda: self._actions.compose_down(node))

    def _open_shell(self, node: DisplayNode) -> None:
        shell = str(self._settings.get_value("terminal", "container_shell", default="/bin/sh"))
        try:
            shell_command = self._actions.shell_command(node, shell)
        except PodmanagerError as exc:
            self._show_error(exc.message)
            return
        dialog = ContainerConsoleDialog(self._invoker, shell_command, node.label, parent=self)
        dialog.setAttribute(QtCore.Qt.WidgetAttribute.WA_DeleteOnClose)
        dialog.finished.connect(lambda _code, d=dialog: self._forget_console(d))
        self._consoles.append(dialog)
        dialog.show()

    def _forget_console(self, dialog: ContainerConsoleDialog) -> None:
        if dialog in self._consoles:
            self._consoles.remove(dialog)

    # ---------------------------------------------------------- toolbar actions
    def _refresh_overview(self) -> None:
        self._run_task(self._provider.refresh_overview, name="refresh-overview")

    def _compose_up(self) -> None:
        compose_file = find_compose_file(self._workspace_dir)
        if compose_file is None:
            file_name, _ = QtWidgets.QFileDialog.getOpenFileName(
                self,
                translate("dialogs.compose_file"),
                str(self._workspace_dir),
                translate("dialogs.compose_filter"),
            )
            if not file_name:
                return
            compose_file = Path(file_name)
        self._run_action(lambda: self._actions.compose_up(compose_file))

    def _start_machine(self) -> None:
        self._run_task(
            self._actions.machine_already_running,
            name="machine-check",
            on_result=self._confirm_machine_start,
        )

    def _confirm_machine_start(self, already_running: Optional[ActionResult]) -> None:
        if already_running is not None:
            self._show_action_result(already_running)
            self._footer.update_machine_status(True)
            return
        if not self._confirm(translate("messages.confirm_start_machine")):
            return
        self._run_action(self._actions.start_machine, on_done=self._update_machine_status)

    def _edit_podman_path(self) -> None:
        current = str(self._settings.get_value("runtime", "podman_path", default=""))
        value, accepted = QtWidgets.QInputDialog.getText(
            self,
            translate("actions.podman_path"),
            translate("dialogs.podman_path"),
            QtWidgets.QLineEdit.EchoMode.Normal,
            current,
        )
        if not accepted:
            return
        try:
            self._settings.set_value("runtime", "podman_path", value.strip())
            self._settings.save_to_disk()
        except SettingsError as exc:
            self._show_error(exc.message)

    def _update_machine_status(self) -> None:
        self._run_task(
            self._actions.machine_is_running,
            name="machine-status",
            on_result=lambda running: self._footer.update_machine_status(bool(running)),
        )

    # ----------------------------------------------------------------- helpers
    def _run_action(
        self,
        func: Callable[[], ActionResult],
        *,
        on_done: Optional[Callable[[], None]] = None,
    ) -> None:
        def handle(result: Any) -> None:
            self._show_action_result(result)
            if on_done is not None:
                on_done()

        self._run_task(func, name="action", on_result=handle)

    def _run_task(
        self,
        func: Callable[[], Any],
        *,
        name: str,
        on_result: Optional[Callable[[Any], None]] = None,
    ) -> None:
        worker = TaskThread(func, name=name)
        if on_result is not None:
            worker.result_ready.connect(on_result)
        worker.error.connect(self._show_error)
        worker.finished.connect(lambda w=worker: self._workers.discard(w))
        worker.finished.connect(worker.deleteLater)
        self._workers.add(worker)
        worker.start()

    def _show_action_result(self, result: ActionResult) -> None:
        if not result.success:
            if result.skipped:
                QtWidgets.QMessageBox.information(self, translate("info.title"), result.message)
            else:
                self._show_error(result.message)
            return
        if result.warnings:
            QtWidgets.QMessageBox.warning(
                self,
                translate("info.title"),
                translate("messages.compose_warnings").format(warnings=result.warnings),
            )
        elif result.skipped:
            QtWidgets.QMessageBox.information(self, translate("info.title"), result.message)
        self.statusBar().showMessage(result.message, 5000)

    def _confirm(self, question: str) -> bool:
        answer = QtWidgets.QMessageBox.question(
            self,
            translate("messages.confirm_title"),
            question,
            QtWidgets.QMessageBox.StandardButton.Yes | QtWidgets.QMessageBox.StandardButton.No,
        )
        return answer == QtWidgets.QMessageBox.StandardButton.Yes

    def _show_error(self, message: str) -> None:
        self._logger.error("UI error: %s", message)
        QtWidgets.QMessageBox.critical(self, translate("errors.title"), message)

    def _start_system_metrics_timer(self) -> None:
        self._system_metrics_timer.start(SYSTEM_METRICS_INTERVAL_MS)
        self._update_system_metrics()

    def _update_system_metrics(self) -> None:
        """Обновляет футер значениями системных метрик."""

        try:
            metrics = read_host_metrics()
        except (OSError, psutil.Error) as exc:
            self._logger.warning("Failed to read host metrics: %s", exc)
            self._footer.update_stats(ram="N/A", cpu="N/A", processes="N/A")
            return
        self._footer.update_stats(
            ram=metrics.ram, cpu=metrics.cpu, processes=str(metrics.runtime_processes)
        )

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:
        self._system_metrics_timer.stop()
        self._provider.unregister_observer(self._bridge)
        self._settings.unregister_observer(self._runtime_observer)
        self._provider.shutdown()
        self._tree_widget.shutdown()
        for worker in list(self._workers):
            worker.wait(2000)
        for console in list(self._consoles):
            console.close()
        if not self.isMaximized():
            geometry = self.geometry()
            self._settings.set_value("app", "window_width", geometry.width())
            self._settings.set_value("app", "window_height", geometry.height())
        self._settings.save_to_disk()
        super().closeEvent(event)


def create_main_window(
    *,
    settings: SettingsRegistry,
    invoker: CLIInvoker,
    provider: ResourceTreeProvider,
    actions: ResourceActions,
    workspace_dir: Path,
) -> MainWindow:
    """Фабрика главного окна."""

    return MainWindow(
        settings=settings,
        invoker=invoker,
        provider=provider,
        actions=actions,
        workspace_dir=workspace_dir,
    )
