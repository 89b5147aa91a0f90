"""Тесты записей podman и правил определения статуса."""

from __future__ import annotations

import pytest

from podmanager.runtime.models import (
    UNKNOWN_PROJECT,
    ContainerRecord,
    ImageRecord,
    MachineRecord,
    PodContainerRecord,
    extract_compose_project,
    is_running,
    is_running_in_pod,
)


@pytest.mark.parametrize(
    ("status", "expected"),
    [
        ("Up 2 hours", True),
        ("Up", True),
        ("up 2 hours", False),
        ("Exited (0) 5 minutes ago", False),
        ("Created", False),
    ],
)
def test_is_running_is_case_sensitive_prefix(status: str, expected: bool) -> None:
    assert is_running(status) is expected


def test_pod_member_status_matches_substring_ignoring_case() -> None:
    assert is_running_in_pod("Up 3 minutes")
    assert is_running_in_pod("running, UP")
    assert not is_running_in_pod("Exited (1)")


def test_extract_compose_project_from_labels() -> None:
    labels = "io.podman.compose.version=1.0,com.docker.compose.project=myapp"
    assert extract_compose_project(labels) == "myapp"


def test_extract_compose_project_strips_whitespace_around_labels() -> None:
    labels = "a=b, com.docker.compose.project=shop ,c=d"
    assert extract_compose_project(labels) == "shop"


def test_extract_compose_project_without_label() -> None:
    assert extract_compose_project("a=b,c=d") == UNKNOWN_PROJECT


def test_extract_compose_project_with_empty_value() -> None:
    assert extract_compose_project("com.docker.compose.project=") == UNKNOWN_PROJECT


def test_container_record_compose_project() -> None:
    record = ContainerRecord("abc", "web", "Up 1 second", "com.docker.compose.project=myapp")
    assert record.running
    assert record.is_compose
    assert record.compose_project == "myapp"

    plain = ContainerRecord("def", "db", "Exited (0)")
    assert not plain.running
    assert not plain.is_compose
    assert plain.compose_project == ""


def test_pod_container_record_uses_pod_rule() -> None:
    assert PodContainerRecord("1", "infra", "running up", "today").running


def test_image_record_wildcard_and_reference() -> None:
    assert ImageRecord("1", "<none>", "latest").has_wildcard
    assert ImageRecord("1", "nginx", "<none>").has_wildcard
    image = ImageRecord("1", "nginx", "1.25")
    assert not image.has_wildcard
    assert image.reference == "nginx:1.25"


@pytest.mark.parametrize(
    ("value", "expected"),
    [("Running", True), ("true", True), (" true ", True), ("false", False), ("", False)],
)
def test_machine_record_is_running(value: str, expected: bool) -> None:
    assert MachineRecord("podman-machine-default", value).is_running is expected


def test_extract_compose_project_with_bare_key() -> None:
    record = ContainerRecord("a", "x", "Up", "com.docker.compose.project")
    assert record.is_compose
    assert extract_compose_project("com.docker.compose.project") == UNKNOWN_PROJECT
    assert record.compose_project == UNKNOWN_PROJECT
