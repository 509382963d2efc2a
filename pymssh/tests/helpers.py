import io
import logging

from pymssh.core.errors import CommandFailed, SessionError


def pem_bytes(key, password=None) -> bytes:
    buf = io.StringIO()
    key.write_private_key(buf, password=password)
    return buf.getvalue().encode()


def diagnostics(caplog):
    return [r for r in caplog.records if r.levelno >= logging.WARNING]


class FakeSession:
    """模拟一个会话: 记录调用, 按配置返回输出或退出码"""

    def __init__(self, host, output="", exit_status=0, write_error=None):
        self.host = host
        self.output = output
        self.exit_status = exit_status
        self.write_error = write_error
        self.started = []
        self.written = b""
        self.stdin_closed = False
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def start(self, command):
        self.started.append(command)

    def write(self, data):
        if self.write_error:
            raise self.write_error
        self.written += data

    def close_stdin(self):
        self.stdin_closed = True

    def wait(self, output=""):
        if self.exit_status != 0:
            raise CommandFailed(self.host, self.exit_status, output)

    def run(self, command):
        self.start(command)
        self.wait(self.output)
        return self.output

    def close(self):
        self.closed = True


class FakeSessionFactory:
    def __init__(self, unreachable=(), **session_kwargs):
        self.unreachable = set(unreachable)
        self.session_kwargs = session_kwargs
        self.sessions = {}

    def open(self, host):
        if host in self.unreachable:
            raise SessionError(host, "Connection refused")
        kwargs = dict(self.session_kwargs)
        kwargs.setdefault("output", f"out-{host}\n")
        session = FakeSession(host, **kwargs)
        self.sessions[host] = session
        return session


