"""Тесты ResourceActions: команды, сообщения, обновление дерева."""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

import pytest

from podmanager.actions import NO_COMPOSE_FILE, ResourceActions, find_compose_file
from podmanager.runtime.exceptions import ActionError, CLIInvocationError
from podmanager.runtime.invoker import CLIResult
from podmanager.tree.nodes import (
    ComposeContainerNode,
    ComposeGroupNode,
    ContainerNode,
    ImageNode,
    ImageTagNode,
    NetworkNode,
    PodNode,
    VolumeNode,
)


class FakeInvoker:
    """Записывает вызовы вместо запуска podman."""

    runtime_executable = "podman"

    def __init__(self) -> None:
        self.calls: List[Tuple[str, str]] = []
        self.fail_with: str | None = None
        self.stdout = ""
        self.stderr = ""

    def _run(self, kind: str, arguments: str) -> CLIResult:
        self.calls.append((kind, arguments))
        if self.fail_with is not None:
            raise CLIInvocationError(f"{kind} {arguments}", self.fail_with, 1)
        return CLIResult(
            command=f"{kind} {arguments}", stdout=self.stdout, stderr=self.stderr
        )

    def run_runtime(self, arguments: str) -> CLIResult:
        return self._run("podman", arguments)

    def run_compose(self, arguments: str) -> CLIResult:
        return self._run("podman-compose", arguments)


class FakeProvider:
    def __init__(self) -> None:
        self.refreshes = 0

    def refresh(self) -> None:
        self.refreshes += 1


@pytest.fixture
def invoker() -> FakeInvoker:
    return FakeInvoker()


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def actions(invoker: FakeInvoker, provider: FakeProvider, tmp_path: Path) -> ResourceActions:
    return ResourceActions(invoker, provider, workspace_dir=tmp_path)  # type: ignore[arg-type]


def _container(container_id: str = "abc123") -> ContainerNode:
    return ContainerNode(
        label=f"web ({container_id})", resource_id=container_id, status_text="Up", running=True
    )


def _compose_group(project: str = "myapp") -> ComposeGroupNode:
    return ComposeGroupNode(label=f"Compose Group 1: {project}", project_name=project)


def test_start_container(
    actions: ResourceActions, invoker: FakeInvoker, provider: FakeProvider
) -> None:
    result = actions.start_container(_container())

    assert result.success
    assert result.message == "Container abc123 started successfully"
    assert invoker.calls == [("podman", "container start abc123")]
    assert provider.refreshes == 1


def test_stop_and_restart_messages(actions: ResourceActions) -> None:
    assert actions.stop_container(_container()).message == "Container abc123 stopped successfully"
    assert (
        actions.restart_container(_container()).message
        == "Container abc123 restarted successfully"
    )


def test_compose_container_accepts_lifecycle_actions(
    actions: ResourceActions, invoker: FakeInvoker
) -> None:
    node = ComposeContainerNode(
        label="db (def456)",
        resource_id="def456",
        status_text="Exited (0)",
        running=False,
        project_name="myapp",
    )
    actions.start_container(node)
    assert invoker.calls == [("podman", "container start def456")]


def test_failed_action_reports_raw_error(
    actions: ResourceActions, invoker: FakeInvoker, provider: FakeProvider
) -> None:
    invoker.fail_with = "Error: no container with name or ID abc123 found"

    result = actions.start_container(_container())

    assert not result.success
    assert result.message == (
        "Failed to start container abc123: Error: no container with name or ID abc123 found"
    )
    assert provider.refreshes == 0


def test_container_action_rejects_other_nodes(actions: ResourceActions) -> None:
    with pytest.raises(ActionError):
        actions.start_container(VolumeNode(label="data (local)", name="data", driver="local"))


def test_deletes_use_forced_remove(actions: ResourceActions, invoker: FakeInvoker) -> None:
    actions.delete_container(_container())
    actions.delete_image(ImageNode(label="nginx:latest (img1)", resource_id="img1"))
    actions.delete_image(ImageTagNode(label="nginx:1.25", resource_id="img1-tag-1", image_id="img1"))
    actions.delete_volume(VolumeNode(label="data (local)", name="data", driver="local"))
    actions.delete_network(NetworkNode(label="net (bridge)", name="net", driver="bridge"))

    assert [arguments for _, arguments in invoker.calls] == [
        "container rm -f abc123",
        "image rm -f img1",
        "image rm -f img1",
        "volume rm -f data",
        "network rm -f net",
    ]


def test_delete_rejects_wrong_kind(actions: ResourceActions) -> None:
    with pytest.raises(ActionError):
        actions.delete_volume(_container())
    with pytest.raises(ActionError):
        actions.delete_network(_container())
    with pytest.raises(ActionError):
        actions.delete_image(_container())


def test_find_compose_file(tmp_path: Path) -> None:
    assert find_compose_file(tmp_path) is None
    assert find_compose_file(None) is None
    (tmp_path / "compose.yaml").write_text("services: {}\n", encoding="utf-8")
    assert find_compose_file(tmp_path) == tmp_path / "compose.yaml"
    (tmp_path / "docker-compose.yml").write_text("services: {}\n", encoding="utf-8")
    assert find_compose_file(tmp_path) == tmp_path / "docker-compose.yml"


def test_compose_up_without_file_skips_subprocess(
    actions: ResourceActions, invoker: FakeInvoker, provider: FakeProvider
) -> None:
    result = actions.compose_up()

    assert not result.success
    assert result.skipped
    assert result.message == NO_COMPOSE_FILE
    assert invoker.calls == []
    assert provider.refreshes == 0


def test_compose_up_discovers_workspace_file(
    actions: ResourceActions, invoker: FakeInvoker, tmp_path: Path
) -> None:
    compose_file = tmp_path / "docker-compose.yml"
    compose_file.write_text("services: {}\n", encoding="utf-8")

    result = actions.compose_up()

    assert result.success
    assert result.message == "Podman Compose up -d executed successfully"
    assert invoker.calls == [("podman-compose", f'-f "{compose_file}" up -d')]


def test_compose_up_with_explicit_file(
    actions: ResourceActions, invoker: FakeInvoker, tmp_path: Path
) -> None:
    compose_file = tmp_path / "other" / "stack.yml"
    actions.compose_up(compose_file)
    assert invoker.calls == [("podman-compose", f'-f "{compose_file}" up -d')]


def test_compose_group_actions_use_project_name(
    actions: ResourceActions, invoker: FakeInvoker
) -> None:
    group = _compose_group()
    actions.compose_start(group)
    actions.compose_stop(group)
    actions.compose_restart(group)
    actions.compose_down(group)

    assert [arguments for _, arguments in invoker.calls] == [
        '-p "myapp" start',
        '-p "myapp" stop',
        '-p "myapp" restart',
        '-p "myapp" down',
    ]


def test_compose_action_prefers_workspace_file(
    actions: ResourceActions, invoker: FakeInvoker, tmp_path: Path
) -> None:
    compose_file = tmp_path / "compose.yml"
    compose_file.write_text("services: {}\n", encoding="utf-8")

    actions.compose_stop(_compose_group())

    assert invoker.calls == [("podman-compose", f'-f "{compose_file}" stop')]


def test_compose_warnings_are_returned(actions: ResourceActions, invoker: FakeInvoker) -> None:
    invoker.stderr = "WARN: orphan containers\n"
    result = actions.compose_down(_compose_group())
    assert result.success
    assert result.warnings == "WARN: orphan containers"


def test_compose_rejects_non_compose_nodes(actions: ResourceActions) -> None:
    with pytest.raises(ActionError):
        actions.compose_stop(PodNode(label="Pod: a", resource_id="p1", status_text=""))


def test_machine_is_running(actions: ResourceActions, invoker: FakeInvoker) -> None:
    invoker.stdout = "podman-machine-default|true\n"
    assert actions.machine_is_running()
    invoker.stdout = "podman-machine-default|false\n"
    assert not actions.machine_is_running()


def test_machine_status_failure_means_stopped(
    actions: ResourceActions, invoker: FakeInvoker
) -> None:
    invoker.fail_with = "podman: command not found"
    assert not actions.machine_is_running()


def test_start_machine_when_already_running(
    actions: ResourceActions, invoker: FakeInvoker
) -> None:
    invoker.stdout = "default|Running\n"

    result = actions.start_machine()

    assert result.success and result.skipped
    assert result.message == "Podman machine is already running."
    assert [arguments for _, arguments in invoker.calls] == [
        'machine list --format "{{.Name}}|{{.Running}}"'
    ]


def test_machine_already_running_only_queries_machine_list(
    actions: ResourceActions, invoker: FakeInvoker
) -> None:
    invoker.stdout = "default|false\n"
    assert actions.machine_already_running() is None

    invoker.stdout = "default|true\n"
    result = actions.machine_already_running()

    assert result is not None and result.skipped
    assert result.message == "Podman machine is already running."
    assert all(arguments != "machine start" for _, arguments in invoker.calls)


def test_start_machine(actions: ResourceActions, invoker: FakeInvoker) -> None:
    invoker.stdout = "default|false\n"

    result = actions.start_machine()

    assert result.success
    assert invoker.calls[-1] == ("podman", "machine start")


def test_shell_command(actions: ResourceActions) -> None:
    command = actions.shell_command(_container(), "bash -l")
    assert command.executable == "podman"
    assert command.arguments == ["exec", "-it", "abc123", "bash", "-l"]
    assert command.display == "podman exec -it abc123 bash -l"


def test_shell_command_falls_back_to_sh(actions: ResourceActions) -> None:
    command = actions.shell_command(_container(), "")
    assert command.arguments[-1] == "/bin/sh"
