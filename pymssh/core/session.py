"""SSH 会话建立"""

import threading
from enum import Enum
from typing import Callable, Optional

import paramiko

from pymssh.core.auth import ClientConfigStrategy
from pymssh.core.errors import AuthenticationExhausted, CommandFailed, SessionError
from pymssh.core.models import ClientConfig
from pymssh.log import get_host_logger

DEFAULT_PORT = 22


class SessionStatus(Enum):
    CONNECTING = "connecting"
    CONNECTED = "connected"


StatusCallback = Callable[[str, SessionStatus], None]


class Session:
    """单个主机上的一个会话通道, 不在任务之间共享"""

    def __init__(self, host: str, client: paramiko.SSHClient, channel: paramiko.Channel):
        self.host = host
        self.client = client
        self.channel = channel
        self.logger = get_host_logger(host)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def start(self, command: str) -> None:
        try:
            self.channel.exec_command(command)
        except paramiko.SSHException as e:
            raise SessionError(self.host, f"cannot start {command!r}: {e}") from e

    def read_output(self) -> str:
        # stderr 与 stdout 共用流控窗口, 必须同时读取
        stderr_chunks = []
        reader = threading.Thread(
            target=lambda: stderr_chunks.append(self.channel.makefile_stderr("rb").read()),
            daemon=True,
        )
        reader.start()
        stdout = self.channel.makefile("rb").read()
        reader.join()
        stderr = b"".join(stderr_chunks)
        if stderr:
            self.logger.debug("stderr: %s", stderr.decode("utf-8", errors="replace").rstrip())
        return stdout.decode("utf-8", errors="replace")

    def write(self, data: bytes) -> None:
        self.channel.sendall(data)

    def close_stdin(self) -> None:
        self.channel.shutdown_write()

    def wait(self, output: str = "") -> None:
        exit_status = self.channel.recv_exit_status()
        if exit_status != 0:
            raise CommandFailed(self.host, exit_status, output)

    def run(self, command: str) -> str:
        self.start(command)
        output = self.read_output()
        self.wait(output)
        return output

    def close(self) -> None:
        self.channel.close()
        self.client.close()


class SessionFactory:
    """使用共享的 ClientConfig 打开到单个主机的会话"""

    def __init__(
        self,
        config: ClientConfig,
        port: int = DEFAULT_PORT,
        status_callback: Optional[StatusCallback] = None,
        known_hosts: Optional[str] = None,
        client_factory: Callable[[], paramiko.SSHClient] = paramiko.SSHClient,
    ):
        self.config = config
        self.port = port
        self.status_callback = status_callback
        self.known_hosts = known_hosts
        self.client_factory = client_factory

    def _report(self, host: str, status: SessionStatus) -> None:
        if self.status_callback:
            self.status_callback(host, status)

    def _new_client(self) -> paramiko.SSHClient:
        client = self.client_factory()
        if self.known_hosts:
            client.load_system_host_keys(self.known_hosts)
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        return client

    def open(self, host: str) -> Session:
        self._report(host, SessionStatus.CONNECTING)

        client = self._new_client()
        try:
            client.connect(
                hostname=host,
                port=self.port,
                username=self.config.user,
                auth_strategy=ClientConfigStrategy(self.config),
                allow_agent=False,
                look_for_keys=False,
            )
            channel = client.get_transport().open_session()
        except paramiko.AuthenticationException as e:
            client.close()
            reason = str(e).strip() or "no authentication method succeeded"
            raise AuthenticationExhausted(host, reason) from e
        except (paramiko.SSHException, OSError) as e:
            client.close()
            raise SessionError(host, str(e)) from e

        self._report(host, SessionStatus.CONNECTED)
        return Session(host, client, channel)
