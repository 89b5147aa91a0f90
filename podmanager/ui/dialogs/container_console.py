"""Интерактивная консоль контейнера (``podman exec -it``) на базе pexpect."""

from __future__ import annotations

from typing import Dict, Optional

import pexpect
from PySide6 import QtCore, QtGui, QtWidgets

from podmanager.actions import ShellCommand
from podmanager.i18n.translator import translate
from podmanager.runtime.exceptions import CLIInvocationError
from podmanager.runtime.invoker import CLIInvoker


class ContainerConsoleDialog(QtWidgets.QDialog):
    """Диалог, отображающий интерактивный вывод podman exec."""

    def __init__(
        self,
        invoker: CLIInvoker,
        shell_command: ShellCommand,
        container_name: str,
        parent: QtWidgets.QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._invoker = invoker
        self._shell_command = shell_command
        self._process: Optional[pexpect.spawn[str]] = None
        self._notifier: Optional[QtCore.QSocketNotifier] = None

        self.setWindowTitle(translate("containers.console.title").format(name=container_name))
        self.resize(900, 600)

        layout = QtWidgets.QVBoxLayout(self)
        self._output = QtWidgets.QPlainTextEdit()
        self._output.setFont(QtGui.QFont("Monospace", 11))
        self._output.setReadOnly(True)
        self._output.installEventFilter(self)
        layout.addWidget(self._output)

        self._status_label = QtWidgets.QLabel("")
        layout.addWidget(self._status_label)

        self._progress = QtWidgets.QProgressBar()
        self._progress.setRange(0, 0)
        self._progress.hide()
        layout.addWidget(self._progress)

        self._spawn_thread: Optional[ConsoleSpawnThread] = None
        self._start_process_async()

    def _start_process_async(self) -> None:
        self._status_label.setText(translate("terminal.messages.connecting"))
        self._progress.show()
        self._output.setDisabled(True)
        thread = ConsoleSpawnThread(invoker=self._invoker, shell_command=self._shell_command)
        thread.success.connect(self._on_spawn_ready)
        thread.error.connect(self._on_spawn_error)
        thread.finished.connect(thread.deleteLater)
        self._spawn_thread = thread
        thread.start()

    def _on_spawn_ready(self, process: pexpect.spawn[str]) -> None:
        self._spawn_thread = None
        self._progress.hide()
        self._output.setDisabled(False)
        self._process = process
        self._notifier = QtCore.QSocketNotifier(
            self._process.fileno(), QtCore.QSocketNotifier.Type.Read
        )
        self._notifier.activated.connect(self._read_output)
        self._status_label.setText(self._shell_command.display)

    def _on_spawn_error(self, message: str) -> None:
        self._progress.hide()
        QtWidgets.QMessageBox.critical(self, translate("terminal.errors.title"), message)
        self.reject()

    # ----------------------------------------------------------------- IO logic
    def _read_output(self) -> None:
        if not self._process:
            return
        try:
            while True:
                chunk = self._process.read_nonblocking(size=4096, timeout=0)
                if not chunk:
                    break
                self._output.moveCursor(QtGui.QTextCursor.MoveOperation.End)
                self._output.insertPlainText(chunk)
                self._output.moveCursor(QtGui.QTextCursor.MoveOperation.End)
        except pexpect.exceptions.TIMEOUT:
            pass
        except pexpect.exceptions.EOF:
            self._process.close()
            code = self._process.exitstatus if self._process.exitstatus is not None else 0
            self._append_message(translate("terminal.messages.finished").format(code=code))
            self._cleanup_process()

    def _append_message(self, message: str) -> None:
        self._output.moveCursor(QtGui.QTextCursor.MoveOperation.End)
        self._output.insertPlainText("\n" + message + "\n")
        self._output.moveCursor(QtGui.QTextCursor.MoveOperation.End)

    # ---------------------------------------------------------------- key input
    def eventFilter(self, obj: QtCore.QObject, event: QtCore.QEvent) -> bool:
        if obj is self._output and event.type() == QtCore.QEvent.Type.KeyPress:
            self._handle_key_event(event)  # type: ignore[arg-type]
            return True
        return super().eventFilter(obj, event)

    def _handle_key_event(self, event: QtGui.QKeyEvent) -> None:
        if not self._process or not self._process.isalive():
            return

        key = event.key()
        text = event.text()

        sequences: Dict[int, str] = {
            QtCore.Qt.Key.Key_Return: "\r",
            QtCore.Qt.Key.Key_Enter: "\r",
            QtCore.Qt.Key.Key_Backspace: "\x7f",
            QtCore.Qt.Key.Key_Escape: "\x1b",
            QtCore.Qt.Key.Key_Tab: "\t",
            QtCore.Qt.Key.Key_Left: "\x1b[D",
            QtCore.Qt.Key.Key_Right: "\x1b[C",
            QtCore.Qt.Key.Key_Up: "\x1b[A",
            QtCore.Qt.Key.Key_Down: "\x1b[B",
        }

        if key in sequences:
            self._process.write(sequences[key])
        elif text:
            self._process.write(text)

    # ---------------------------------------------------------------- lifecycle
    def closeEvent(self, event: QtGui.QCloseEvent) -> None:
        self._cleanup_process()
        super().closeEvent(event)

    def _cleanup_process(self) -> None:
        if self._notifier is not None:
            self._notifier.setEnabled(False)
            self._notifier.deleteLater()
            self._notifier = None
        if self._process is not None:
            if self._process.isalive():
                self._process.terminate()
            self._process.close(force=True)
            self._process = None
        if self._spawn_thread is not None:
            self._spawn_thread.quit()
            self._spawn_thread.wait(1000)
            self._spawn_thread = None


class ConsoleSpawnThread(QtCore.QThread):
    """Запускает ``podman exec -it`` вне GUI-потока."""

    success = QtCore.Signal(object)
    error = QtCore.Signal(str)

    def __init__(self, *, invoker: CLIInvoker, shell_command: ShellCommand) -> None:
        super().__init__()
        self._invoker = invoker
        self._shell_command = shell_command

    def run(self) -> None:
        try:
            process = self._invoker.spawn_interactive(self._shell_command.arguments)
        except CLIInvocationError as exc:
            self.error.emit(exc.message)
            return
        self.success.emit(process)
