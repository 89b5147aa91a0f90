"""Футер панели: статус podman machine и загрузка хоста."""

from __future__ import annotations

from PySide6 import QtWidgets

from podmanager.i18n.translator import translate


class FooterWidget(QtWidgets.QWidget):
    """Нижняя панель с короткими статусами."""

    def __init__(self, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(8, 4, 8, 4)
        layout.setSpacing(2)

        self._machine_label = QtWidgets.QLabel("")
        layout.addWidget(self._machine_label)

        self._stats_label = QtWidgets.QLabel("")
        self.update_stats(ram="N/A", cpu="N/A", processes="N/A")
        layout.addWidget(self._stats_label)

    def update_machine_status(self, running: bool) -> None:
        key = "footer.machine_running" if running else "footer.machine_stopped"
        self._machine_label.setText(translate(key))
        self._machine_label.setObjectName(
            "machineStatusRunning" if running else "machineStatusStopped"
        )
        # objectName участвует в селекторах QSS только после repolish
        style = self._machine_label.style()
        style.unpolish(self._machine_label)
        style.polish(self._machine_label)

    def update_stats(self, *, ram: str, cpu: str, processes: str) -> None:
        """Отображает загрузку хоста и число процессов podman."""

        self._stats_label.setText(
            f"{translate('footer.stat_ram')}: {ram}   {translate('footer.stat_cpu')}: {cpu}\n"
            f"{translate('footer.stat_processes')}: {processes}"
        )
