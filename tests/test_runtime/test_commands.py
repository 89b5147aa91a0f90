"""Тесты построения аргументов podman и podman-compose."""

from __future__ import annotations

import pytest

from podmanager.runtime import commands


def test_container_action() -> None:
    assert commands.container_action("start", "abc") == "container start abc"
    assert commands.container_action("restart", "abc") == "container restart abc"


def test_container_action_unknown() -> None:
    with pytest.raises(ValueError):
        commands.container_action("pause", "abc")


def test_remove_commands_are_forced() -> None:
    assert commands.remove_container("abc") == "container rm -f abc"
    assert commands.remove_image("img") == "image rm -f img"
    assert commands.remove_volume("data") == "volume rm -f data"
    assert commands.remove_network("net") == "network rm -f net"


def test_list_pod_containers_filters_by_pod() -> None:
    command = commands.list_pod_containers("p1")
    assert 'ps --filter "pod=p1"' in command
    assert "{{.CreatedAt}}" in command


def test_exec_shell_defaults_to_sh() -> None:
    assert commands.exec_shell("abc", []) == ["exec", "-it", "abc", "/bin/sh"]
    assert commands.exec_shell("abc", ["bash", "-l"]) == ["exec", "-it", "abc", "bash", "-l"]


def test_compose_prefers_file_over_project() -> None:
    result = commands.compose("up", compose_file="/tmp/compose.yml", project="myapp")
    assert result == '-f "/tmp/compose.yml" up -d'


def test_compose_by_project() -> None:
    assert commands.compose("down", project="myapp") == '-p "myapp" down'


def test_compose_requires_target() -> None:
    with pytest.raises(ValueError):
        commands.compose("stop")


def test_compose_unknown_action() -> None:
    with pytest.raises(ValueError):
        commands.compose("build", project="myapp")
