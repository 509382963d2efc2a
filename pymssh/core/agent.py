"""ssh-agent 连接"""

import errno
import logging
import socket
import threading
from typing import Callable, Tuple

import paramiko
from paramiko.agent import AgentSSH
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    wait_random,
)

from pymssh.core.errors import TransientSocketError

logger = logging.getLogger(__name__)

# 可重试的 errno, 其余错误视为永久失败
TRANSIENT_ERRNOS = frozenset(
    {
        errno.EINTR,
        errno.EAGAIN,
        errno.EWOULDBLOCK,
        errno.ECONNRESET,
        errno.ECONNABORTED,
        errno.ETIMEDOUT,
        errno.EMFILE,
        errno.ENFILE,
    }
)

# 重试间隔上限（秒）
MAX_JITTER = 0.1


def is_transient(error: OSError) -> bool:
    return isinstance(error, InterruptedError) or error.errno in TRANSIENT_ERRNOS


def dial_unix(path: str) -> socket.socket:
    """连接 unix socket, 可重试的错误转换为 TransientSocketError"""
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.connect(path)
    except OSError as e:
        sock.close()
        if is_transient(e):
            raise TransientSocketError(path, e) from e
        raise
    return sock


def dial_agent(
    path: str,
    dial: Callable[[str], socket.socket] = dial_unix,
    wait=wait_random(0, MAX_JITTER),
) -> socket.socket:
    """无限重试瞬时错误直到连接成功或出现永久错误"""
    retryer = Retrying(
        retry=retry_if_exception_type(TransientSocketError),
        wait=wait,
        before_sleep=before_sleep_log(logger, logging.DEBUG),
        reraise=True,
    )
    return retryer(dial, path)


class SocketAgent(AgentSSH):
    """基于已建立连接的 agent 客户端"""

    def __init__(self, conn: socket.socket):
        super().__init__()
        # 所有主机的签名请求共用同一个连接
        self._lock = threading.Lock()
        # 发送 REQUEST_IDENTITIES 并缓存返回的公钥
        self._connect(conn)

    def _send_message(self, msg):
        with self._lock:
            return super()._send_message(msg)

    def request_identities(self) -> Tuple[paramiko.AgentKey, ...]:
        return self.get_keys()

    def close(self) -> None:
        conn = self._conn
        self._close()
        if conn is not None:
            conn.close()
