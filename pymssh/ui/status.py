import threading
from typing import Optional

from rich.console import Console

from pymssh.core.session import SessionStatus

# 清除当前行
CLEAR_LINE = "\r\033[2K"


class StatusLine:
    """在 stderr 上显示可覆盖的连接状态, 仅在终端中显示"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)
        self._lock = threading.Lock()

    def __call__(self, host: str, status: SessionStatus) -> None:
        if status == SessionStatus.CONNECTING:
            self.show(f"Connecting to {host}")
        else:
            self.show(f"Connected to {host}")

    def show(self, message: str) -> None:
        if not self.console.is_terminal:
            return
        with self._lock:
            self.console.file.write(f"{CLEAR_LINE}{message}\r")
            self.console.file.flush()

    def progress(self, completed: int, total: int, result) -> None:
        """Dispatcher 的进度回调"""
        self.show(f"Completed {completed}/{total} hosts, last: {result.host}")

    def clear(self) -> None:
        if not self.console.is_terminal:
            return
        with self._lock:
            self.console.file.write(CLEAR_LINE)
            self.console.file.flush()
