"""Запуск внешних команд podman / podman-compose и захват их вывода."""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import Any, List, Optional, Protocol

import pexpect

from podmanager.runtime.exceptions import CLIInvocationError

LOGGER = logging.getLogger(__name__)

DEFAULT_RUNTIME = "podman"
DEFAULT_COMPOSE = "podman-compose"


class RuntimeSettings(Protocol):
    """Минимальный контракт настроек, нужный для поиска исполняемых файлов."""

    def get_value(self, group: str, key: str, default: Any = None) -> Any:  # pragma: no cover
        """Возвращает значение настройки."""


@dataclass(slots=True)
class CLIResult:
    """Результат завершившейся команды."""

    command: str
    stdout: str
    stderr: str
    return_code: int = 0


class CLIInvoker:
    """Выполняет строку команды через shell и возвращает stdout/stderr.

    Идентификаторы ресурсов подставляются в строку как есть, без экранирования:
    вызывающий код считается доверенным локальным пользователем. Таймаута нет,
    зависание podman блокирует соответствующий вызов.
    """

    def __init__(self, settings: Optional[RuntimeSettings] = None) -> None:
        self._settings = settings

    # ---------------------------------------------------------- executables
    @property
    def runtime_executable(self) -> str:
        """Путь к podman из настроек либо голое имя для поиска в PATH."""

        value = self._setting("podman_path")
        return value or DEFAULT_RUNTIME

    @property
    def compose_executable(self) -> str:
        """Путь к podman-compose из настроек."""

        value = self._setting("compose_path")
        return value or DEFAULT_COMPOSE

    def _setting(self, key: str) -> str:
        if self._settings is None:
            return ""
        value = self._settings.get_value("runtime", key, default="")
        return str(value or "").strip()

    # ------------------------------------------------------------------ run
    def run(self, command: str) -> CLIResult:
        """Выполняет команду и ждёт завершения."""

        LOGGER.debug("Running command: %s", command)
        try:
            completed = subprocess.run(  # noqa: S602 - команды строятся из доверенного ввода
                command,
                shell=True,
                check=False,
                text=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=os.environ.copy(),
            )
        except OSError as exc:
            raise CLIInvocationError(command, str(exc)) from exc

        stdout = completed.stdout or ""
        stderr = completed.stderr or ""
        if completed.returncode != 0:
            message = stderr.strip() or stdout.strip() or f"exit code {completed.returncode}"
            raise CLIInvocationError(command, message, return_code=completed.returncode)
        return CLIResult(
            command=command,
            stdout=stdout,
            stderr=stderr,
            return_code=completed.returncode,
        )

    def run_runtime(self, arguments: str) -> CLIResult:
        """Выполняет подкоманду podman."""

        return self.run(f"{self.runtime_executable} {arguments}")

    def run_compose(self, arguments: str) -> CLIResult:
        """Выполняет подкоманду podman-compose."""

        return self.run(f"{self.compose_executable} {arguments}")

    def spawn_interactive(self, arguments: List[str]) -> "pexpect.spawn[str]":
        """Запускает интерактивную сессию podman (например, exec -it)."""

        LOGGER.info("Spawning interactive session: %s %s", self.runtime_executable, arguments)
        try:
            return pexpect.spawn(
                self.runtime_executable,
                arguments,
                encoding="utf-8",
                echo=False,
                timeout=None,
            )
        except pexpect.exceptions.ExceptionPexpect as exc:
            command = " ".join([self.runtime_executable, *arguments])
            raise CLIInvocationError(command, str(exc)) from exc
