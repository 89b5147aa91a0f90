"""Загрузка хоста и процессы podman для футера панели (psutil)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet

import psutil

# podman, мониторы контейнеров и процессы виртуальной машины podman machine
RUNTIME_PROCESS_NAMES: FrozenSet[str] = frozenset(
    {
        "podman",
        "conmon",
        "gvproxy",
        "vfkit",
        "qemu-system-x86_64",
        "qemu-system-aarch64",
    }
)


@dataclass(slots=True)
class HostMetrics:
    """Снимок загрузки хоста, на котором работает podman."""

    ram_percent: float
    ram_used: int
    ram_total: int
    cpu_percent: float
    runtime_processes: int

    @property
    def ram(self) -> str:
        return (
            f"{self.ram_percent:.1f}% "
            f"({format_bytes(self.ram_used)}/{format_bytes(self.ram_total)})"
        )

    @property
    def cpu(self) -> str:
        return f"{self.cpu_percent:.1f}%"


def count_runtime_processes(names: FrozenSet[str] = RUNTIME_PROCESS_NAMES) -> int:
    """Число процессов с именем из ``names``; недоступные имена пропускаются."""

    count = 0
    for process in psutil.process_iter(["name"]):
        if (process.info.get("name") or "") in names:
            count += 1
    return count


def read_host_metrics() -> HostMetrics:
    memory = psutil.virtual_memory()
    return HostMetrics(
        ram_percent=memory.percent,
        ram_used=memory.used,
        ram_total=memory.total,
        cpu_percent=psutil.cpu_percent(interval=None),
        runtime_processes=count_runtime_processes(),
    )


def format_bytes(value: float) -> str:
    """Форматирует байты в удобочитаемый вид."""

    units = ["B", "KB", "MB", "GB", "TB"]
    size = float(value)
    index = 0
    while size >= 1024 and index < len(units) - 1:
        size /= 1024.0
        index += 1
    return f"{size:.1f} {units[index]}"
