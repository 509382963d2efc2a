"""文件分发模块"""

import shlex
from typing import Iterable, Optional

import paramiko

from pymssh.core.dispatcher import Dispatcher
from pymssh.core.errors import SourceReadError, UploadError
from pymssh.core.models import ResultMap
from pymssh.core.session import SessionFactory
from pymssh.log import get_host_logger


def read_source(path: str) -> bytes:
    """读取待分发的本地文件, 失败时终止整个分发"""
    try:
        with open(path, "rb") as fp:
            return fp.read()
    except OSError as e:
        raise SourceReadError(path, e) from e


def receive_command(target: str) -> str:
    return f"cat > {shlex.quote(target)}"


class FileUploader:
    """通过远程 `cat > target` 的标准输入写入文件内容"""

    def __init__(self, sessions: SessionFactory, dispatcher: Optional[Dispatcher] = None):
        self.sessions = sessions
        self.dispatcher = dispatcher or Dispatcher()

    def upload(self, host: str, target: str, content: bytes) -> None:
        with self.sessions.open(host) as session:
            session.start(receive_command(target))

            try:
                session.write(content)
            except (OSError, paramiko.SSHException) as e:
                raise UploadError(host, "write", e) from e

            try:
                session.close_stdin()
            except (OSError, paramiko.SSHException) as e:
                raise UploadError(host, "close", e) from e

            session.wait()

        get_host_logger(host).info("%d bytes => %s:%s", len(content), host, target)

    def upload_parallel(self, hosts: Iterable[str], target: str, content: bytes) -> ResultMap:
        return self.dispatcher.run(hosts, lambda host: self.upload(host, target, content))
