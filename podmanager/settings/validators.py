"""Правила проверки значений настроек панели."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Any, FrozenSet, Iterable, Tuple

ValidationResult = Tuple[bool, str]

# символы, которые shell воспримет как продолжение команды
SHELL_METACHARACTERS: FrozenSet[str] = frozenset(";|&`\r\n")
HEX_COLOR = re.compile(r"#[0-9a-fA-F]{6}")


class Validator(ABC):
    """Проверка одного значения настройки."""

    @abstractmethod
    def validate(self, value: Any) -> ValidationResult:
        """Возвращает (True, "") при успехе либо (False, описание ошибки)."""


class TypeValidator(Validator):
    def __init__(self, expected_type: type) -> None:
        self.expected_type = expected_type

    def validate(self, value: Any) -> ValidationResult:
        if isinstance(value, self.expected_type):
            return True, ""
        return (
            False,
            f"Expected value of type {self.expected_type.__name__}, got {type(value).__name__}",
        )


class IntRangeValidator(Validator):
    """Целое число (не bool) в пределах [minimum, maximum]."""

    def __init__(self, minimum: int, maximum: int) -> None:
        self.minimum = minimum
        self.maximum = maximum

    def validate(self, value: Any) -> ValidationResult:
        if isinstance(value, bool) or not isinstance(value, int):
            return False, f"Expected integer, got {type(value).__name__}"
        if not self.minimum <= value <= self.maximum:
            return False, f"Value {value} is out of range [{self.minimum}, {self.maximum}]"
        return True, ""


class ChoiceValidator(Validator):
    def __init__(self, choices: Iterable[str]) -> None:
        self.choices = tuple(choices)

    def validate(self, value: Any) -> ValidationResult:
        if value in self.choices:
            return True, ""
        return False, f"Value {value!r} not in allowed values: {list(self.choices)}"


class ExecutableValidator(Validator):
    """Путь или имя исполняемого файла, подставляемое в командную строку.

    Пустая строка разрешена: invoker подставит имя по умолчанию и найдёт его
    в ``PATH``. Метасимволы shell запрещены, так как путь не экранируется.
    """

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, str):
            return False, f"Expected executable path string, got {type(value).__name__}"
        forbidden = sorted(SHELL_METACHARACTERS.intersection(value))
        if forbidden:
            return False, f"Executable path contains shell metacharacters: {forbidden!r}"
        return True, ""


class HexColorValidator(Validator):
    def validate(self, value: Any) -> ValidationResult:
        if isinstance(value, str) and HEX_COLOR.fullmatch(value):
            return True, ""
        return False, f"Value {value!r} is not a #rrggbb color"
