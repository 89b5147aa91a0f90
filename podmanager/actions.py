"""Действия над ресурсами: жизненный цикл контейнеров, удаление, compose, машина.

Каждое действие возвращает ``ActionResult``; после успешного выполнения
дерево ресурсов получает сигнал обновления.
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from podmanager.runtime import commands, parsers
from podmanager.runtime.exceptions import ActionError, CLIInvocationError
from podmanager.runtime.invoker import CLIInvoker
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

LOGGER = logging.getLogger(__name__)

COMPOSE_FILE_NAMES = (
    "docker-compose.yml",
    "docker-compose.yaml",
    "compose.yml",
    "compose.yaml",
)
NO_COMPOSE_FILE = "No compose file found"


@dataclass(slots=True)
class ActionResult:
    """Результат действия."""

    success: bool
    message: str
    command: Optional[str] = None
    warnings: Optional[str] = None
    skipped: bool = False


@dataclass(slots=True)
class ShellCommand:
    """Аргументы интерактивной сессии в контейнере."""

    executable: str
    arguments: List[str] = field(default_factory=list)

    @property
    def display(self) -> str:
        return " ".join([self.executable, *self.arguments])


def find_compose_file(workspace_dir: Optional[Path]) -> Optional[Path]:
    """Ищет compose-файл в корне рабочей директории."""

    if workspace_dir is None:
        return None
    for file_name in COMPOSE_FILE_NAMES:
        candidate = workspace_dir / file_name
        if candidate.is_file():
            return candidate
    return None


class ResourceActions:
    """Выполняет команды podman для выбранных узлов дерева."""

    def __init__(
        self,
        invoker: CLIInvoker,
        provider: ResourceTreeProvider,
        *,
        workspace_dir: Optional[Path] = None,
    ) -> None:
        self._invoker = invoker
        self._provider = provider
        self.workspace_dir = workspace_dir

    # -------------------------------------------------------------- containers
    def start_container(self, node: DisplayNode) -> ActionResult:
        return self._container_action("start", node)

    def stop_container(self, node: DisplayNode) -> ActionResult:
        return self._container_action("stop", node)

    def restart_container(self, node: DisplayNode) -> ActionResult:
        return self._container_action("restart", node)

    def delete_container(self, node: DisplayNode) -> ActionResult:
        container_id = self._container_id("delete container", node)
        return self._execute(
            commands.remove_container(container_id),
            success=f"Container {container_id} deleted successfully",
            failure=f"Failed to delete container {container_id}",
        )

    def _container_action(self, action: str, node: DisplayNode) -> ActionResult:
        container_id = self._container_id(f"{action} container", node)
        past = "stopped" if action == "stop" else f"{action}ed"
        return self._execute(
            commands.container_action(action, container_id),
            success=f"Container {container_id} {past} successfully",
            failure=f"Failed to {action} container {container_id}",
        )

    @staticmethod
    def _container_id(action: str, node: DisplayNode) -> str:
        if not isinstance(node, (ContainerNode, ComposeContainerNode)):
            raise ActionError(action, f"{node.kind.value} node is not a container")
        if not node.resource_id:
            raise ActionError(action, "container id is missing")
        return node.resource_id

    # ----------------------------------------------------------------- deletes
    def delete_image(self, node: DisplayNode) -> ActionResult:
        if isinstance(node, ImageNode):
            image_id = node.resource_id
        elif isinstance(node, ImageTagNode):
            image_id = node.image_id
        else:
            raise ActionError("delete image", f"{node.kind.value} node is not an image")
        return self._execute(
            commands.remove_image(image_id),
            success=f"Image {image_id} deleted successfully",
            failure=f"Failed to delete image {image_id}",
        )

    def delete_volume(self, node: DisplayNode) -> ActionResult:
        if not isinstance(node, VolumeNode):
            raise ActionError("delete volume", f"{node.kind.value} node is not a volume")
        return self._execute(
            commands.remove_volume(node.name),
            success=f"Volume {node.name} deleted successfully",
            failure=f"Failed to delete volume {node.name}",
        )

    def delete_network(self, node: DisplayNode) -> ActionResult:
        if not isinstance(node, NetworkNode):
            raise ActionError("delete network", f"{node.kind.value} node is not a network")
        return self._execute(
            commands.remove_network(node.name),
            success=f"Network {node.name} deleted successfully",
            failure=f"Failed to delete network {node.name}",
        )

    # ----------------------------------------------------------------- compose
    def compose_up(self, compose_file: Optional[Path] = None) -> ActionResult:
        return self._compose("up", compose_file=compose_file)

    def compose_start(self, node: DisplayNode) -> ActionResult:
        return self._compose("start", project=self._project_name(node))

    def compose_stop(self, node: DisplayNode) -> ActionResult:
        return self._compose("stop", project=self._project_name(node))

    def compose_restart(self, node: DisplayNode) -> ActionResult:
        return self._compose("restart", project=self._project_name(node))

    def compose_down(self, node: DisplayNode) -> ActionResult:
        return self._compose("down", project=self._project_name(node))

    @staticmethod
    def _project_name(node: DisplayNode) -> Optional[str]:
        if isinstance(node, (ComposeGroupNode, ComposeContainerNode)):
            return node.project_name or None
        raise ActionError("run compose command", f"{node.kind.value} node has no compose project")

    def _compose(
        self,
        action: str,
        *,
        compose_file: Optional[Path] = None,
        project: Optional[str] = None,
    ) -> ActionResult:
        if compose_file is None:
            compose_file = find_compose_file(self.workspace_dir)
        if compose_file is None and not project:
            LOGGER.warning("Compose %s aborted: %s", action, NO_COMPOSE_FILE)
            return ActionResult(success=False, message=NO_COMPOSE_FILE, skipped=True)

        arguments = commands.compose(
            action,
            compose_file=str(compose_file) if compose_file else None,
            project=project,
        )
        subcommand = commands.COMPOSE_ACTIONS[action]
        return self._execute(
            arguments,
            success=f"Podman Compose {subcommand} executed successfully",
            failure=f"Failed to execute Podman Compose {subcommand}",
            compose=True,
        )

    # ----------------------------------------------------------------- machine
    def machine_is_running(self) -> bool:
        """Проверяет, запущена ли хотя бы одна podman machine."""

        try:
            result = self._invoker.run_runtime(commands.LIST_MACHINES)
        except CLIInvocationError as exc:
            LOGGER.error("Failed to check Podman machine status: %s", exc.message)
            return False
        return any(machine.is_running for machine in parsers.parse_machines(result.stdout))

    def machine_already_running(self) -> Optional[ActionResult]:
        """Готовый результат, если запускать machine не нужно."""

        if not self.machine_is_running():
            return None
        return ActionResult(
            success=True,
            message="Podman machine is already running.",
            skipped=True,
        )

    def start_machine(self) -> ActionResult:
        already_running = self.machine_already_running()
        if already_running is not None:
            return already_running
        return self._execute(
            commands.MACHINE_START,
            success="Podman machine started successfully",
            failure="Failed to start Podman machine",
        )

    # ------------------------------------------------------------------- shell
    def shell_command(self, node: DisplayNode, shell: str = "/bin/sh") -> ShellCommand:
        """Аргументы для ``podman exec -it <id> <shell>``."""

        container_id = self._container_id("open shell", node)
        return ShellCommand(
            executable=self._invoker.runtime_executable,
            arguments=commands.exec_shell(container_id, list(_split_shell(shell))),
        )

    # ----------------------------------------------------------------- helpers
    def _execute(
        self,
        arguments: str,
        *,
        success: str,
        failure: str,
        compose: bool = False,
    ) -> ActionResult:
        runner = self._invoker.run_compose if compose else self._invoker.run_runtime
        try:
            result = runner(arguments)
        except CLIInvocationError as exc:
            LOGGER.error("%s: %s", failure, exc.message)
            return ActionResult(
                success=False,
                message=f"{failure}: {exc.message}",
                command=exc.command,
            )
        LOGGER.info(success)
        self._provider.refresh()
        warnings = result.stderr.strip() if compose and result.stderr.strip() else None
        return ActionResult(
            success=True,
            message=success,
            command=result.command,
            warnings=warnings,
        )


def _split_shell(value: str) -> Sequence[str]:
    try:
        parts = shlex.split(value)
    except ValueError:
        return ["/bin/sh"]
    return parts or ["/bin/sh"]
