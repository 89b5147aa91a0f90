"""Тесты CLIInvoker с подменой subprocess и pexpect."""

from __future__ import annotations

import subprocess
from typing import Any, Dict, List

import pexpect
import pytest

from podmanager.runtime import invoker as invoker_module
from podmanager.runtime.exceptions import CLIInvocationError
from podmanager.runtime.invoker import CLIInvoker


class FakeSettings:
    def __init__(self, values: Dict[str, Any]) -> None:
        self._values = values

    def get_value(self, group: str, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)


class RunRecorder:
    def __init__(self, returncode: int = 0, stdout: str = "", stderr: str = "") -> None:
        self.commands: List[str] = []
        self._returncode = returncode
        self._stdout = stdout
        self._stderr = stderr

    def __call__(self, command: str, **kwargs: Any) -> subprocess.CompletedProcess[str]:
        self.commands.append(command)
        assert kwargs["shell"] is True
        return subprocess.CompletedProcess(
            command, self._returncode, stdout=self._stdout, stderr=self._stderr
        )


def test_default_executables() -> None:
    invoker = CLIInvoker()
    assert invoker.runtime_executable == "podman"
    assert invoker.compose_executable == "podman-compose"


def test_executables_from_settings() -> None:
    invoker = CLIInvoker(FakeSettings({"podman_path": "/opt/podman", "compose_path": " "}))
    assert invoker.runtime_executable == "/opt/podman"
    assert invoker.compose_executable == "podman-compose"


def test_run_runtime_returns_stdout(monkeypatch: pytest.MonkeyPatch) -> None:
    recorder = RunRecorder(stdout="abc|web|Up|\n")
    monkeypatch.setattr(invoker_module.subprocess, "run", recorder)

    result = CLIInvoker().run_runtime("container ls -a")

    assert recorder.commands == ["podman container ls -a"]
    assert result.stdout == "abc|web|Up|\n"
    assert result.return_code == 0


def test_run_compose_uses_compose_executable(monkeypatch: pytest.MonkeyPatch) -> None:
    recorder = RunRecorder()
    monkeypatch.setattr(invoker_module.subprocess, "run", recorder)

    CLIInvoker().run_compose('-p "myapp" stop')

    assert recorder.commands == ['podman-compose -p "myapp" stop']


def test_nonzero_exit_raises_with_stderr(monkeypatch: pytest.MonkeyPatch) -> None:
    recorder = RunRecorder(returncode=125, stderr="Error: no such container\n")
    monkeypatch.setattr(invoker_module.subprocess, "run", recorder)

    with pytest.raises(CLIInvocationError) as exc_info:
        CLIInvoker().run_runtime("container start missing")

    assert exc_info.value.message == "Error: no such container"
    assert exc_info.value.return_code == 125
    assert exc_info.value.command == "podman container start missing"


def test_nonzero_exit_without_output(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(invoker_module.subprocess, "run", RunRecorder(returncode=2))

    with pytest.raises(CLIInvocationError, match="exit code 2"):
        CLIInvoker().run("false")


def test_os_error_is_wrapped(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken(command: str, **kwargs: Any) -> None:
        raise OSError("fork failed")

    monkeypatch.setattr(invoker_module.subprocess, "run", broken)

    with pytest.raises(CLIInvocationError, match="fork failed"):
        CLIInvoker().run("podman ps")


def test_spawn_interactive(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: List[Any] = []

    def fake_spawn(command: str, args: List[str], **kwargs: Any) -> str:
        calls.append((command, args, kwargs))
        return "process"

    monkeypatch.setattr(invoker_module.pexpect, "spawn", fake_spawn)

    process = CLIInvoker().spawn_interactive(["exec", "-it", "abc", "/bin/sh"])

    assert process == "process"
    assert calls[0][0] == "podman"
    assert calls[0][1] == ["exec", "-it", "abc", "/bin/sh"]
    assert calls[0][2]["encoding"] == "utf-8"


def test_spawn_interactive_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_spawn(command: str, args: List[str], **kwargs: Any) -> None:
        raise pexpect.exceptions.ExceptionPexpect("The command was not found")

    monkeypatch.setattr(invoker_module.pexpect, "spawn", fake_spawn)

    with pytest.raises(CLIInvocationError, match="not found"):
        CLIInvoker().spawn_interactive(["exec", "-it", "abc", "sh"])
