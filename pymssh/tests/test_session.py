import socket
import threading
from unittest.mock import MagicMock

import paramiko
import pytest

from pymssh.core.auth import AuthResolver, ClientConfigStrategy
from pymssh.core.errors import AuthenticationExhausted, CommandFailed, SessionError
from pymssh.core.models import ClientConfig
from pymssh.core.session import Session, SessionFactory, SessionStatus
from pymssh.settings import Settings


class StrategyClient:
    """connect 时真正执行 auth_strategy 的假 SSHClient"""

    def __init__(self):
        self.closed = False

    def set_missing_host_key_policy(self, policy):
        pass

    def load_system_host_keys(self, filename=None):
        pass

    def connect(self, hostname, port, username, auth_strategy, **kwargs):
        auth_strategy.authenticate(transport=MagicMock())

    def get_transport(self):
        return MagicMock()

    def close(self):
        self.closed = True


class ExecServer(paramiko.ServerInterface):
    """只允许 none 认证并接受 exec 请求的测试服务端"""

    def __init__(self):
        self.exec_requested = threading.Event()

    def get_allowed_auths(self, username):
        return "none"

    def check_auth_none(self, username):
        return paramiko.AUTH_SUCCESSFUL

    def check_channel_request(self, kind, chanid):
        return paramiko.OPEN_SUCCEEDED

    def check_channel_exec_request(self, channel, command):
        self.exec_requested.set()
        return True


def serve_exec(sock, host_key, stderr_size):
    transport = paramiko.Transport(sock)
    transport.add_server_key(host_key)
    server = ExecServer()
    transport.start_server(server=server)
    channel = transport.accept(10)
    server.exec_requested.wait(10)
    channel.sendall_stderr(b"x" * stderr_size)
    channel.sendall(b"hello\n")
    channel.send_exit_status(0)
    channel.close()


def make_channel(stdout=b"", stderr=b"", exit_status=0):
    channel = MagicMock()
    channel.makefile.return_value.read.return_value = stdout
    channel.makefile_stderr.return_value.read.return_value = stderr
    channel.recv_exit_status.return_value = exit_status
    return channel


class TestSessionFactory:
    def test_open_reports_status(self):
        client = MagicMock()
        channel = make_channel()
        client.get_transport.return_value.open_session.return_value = channel
        statuses = []
        config = ClientConfig(user="deploy")

        factory = SessionFactory(
            config,
            status_callback=lambda host, status: statuses.append((host, status)),
            client_factory=lambda: client,
        )
        session = factory.open("web1")

        assert session.channel is channel
        assert statuses == [
            ("web1", SessionStatus.CONNECTING),
            ("web1", SessionStatus.CONNECTED),
        ]
        kwargs = client.connect.call_args.kwargs
        assert kwargs["hostname"] == "web1"
        assert kwargs["port"] == 22
        assert kwargs["username"] == "deploy"
        assert isinstance(kwargs["auth_strategy"], ClientConfigStrategy)
        assert kwargs["auth_strategy"].config is config

    def test_custom_port_and_known_hosts(self):
        client = MagicMock()
        factory = SessionFactory(
            ClientConfig(user="deploy"),
            port=2222,
            known_hosts="/tmp/known_hosts",
            client_factory=lambda: client,
        )

        factory.open("web1")

        client.load_system_host_keys.assert_called_once_with("/tmp/known_hosts")
        assert client.connect.call_args.kwargs["port"] == 2222

    def test_connection_refused(self):
        client = MagicMock()
        client.connect.side_effect = ConnectionRefusedError(111, "Connection refused")
        statuses = []

        factory = SessionFactory(
            ClientConfig(user="deploy"),
            status_callback=lambda host, status: statuses.append(status),
            client_factory=lambda: client,
        )
        with pytest.raises(SessionError) as excinfo:
            factory.open("web2")

        assert excinfo.value.host == "web2"
        assert not isinstance(excinfo.value, AuthenticationExhausted)
        assert statuses == [SessionStatus.CONNECTING]
        client.close.assert_called_once()

    def test_authentication_failed(self):
        client = MagicMock()
        client.connect.side_effect = paramiko.AuthenticationException("denied")

        factory = SessionFactory(ClientConfig(user="deploy"), client_factory=lambda: client)
        with pytest.raises(AuthenticationExhausted):
            factory.open("web3")
        client.close.assert_called_once()

    def test_no_credentials_exhausts_authentication(self, tmp_path):
        settings = Settings(user="deploy", home=str(tmp_path), agent_socket=None)
        config = AuthResolver(settings).resolve()
        assert config.auth_methods == ()

        clients = []

        def client_factory():
            clients.append(StrategyClient())
            return clients[-1]

        factory = SessionFactory(config, client_factory=client_factory)
        for host in ["h1", "h2"]:
            with pytest.raises(AuthenticationExhausted):
                factory.open(host)

        assert all(c.closed for c in clients)


class TestSession:
    def test_run_captures_stdout(self):
        channel = make_channel(stdout=b"hello\n", stderr=b"warning\n")
        session = Session("web1", MagicMock(), channel)

        assert session.run("echo hello") == "hello\n"
        channel.exec_command.assert_called_once_with("echo hello")

    def test_run_non_zero_exit(self):
        channel = make_channel(stdout=b"partial", exit_status=3)
        session = Session("web1", MagicMock(), channel)

        with pytest.raises(CommandFailed) as excinfo:
            session.run("false")

        assert excinfo.value.exit_status == 3
        assert excinfo.value.output == "partial"

    def test_start_failure(self):
        channel = make_channel()
        channel.exec_command.side_effect = paramiko.SSHException("Channel closed.")
        session = Session("web1", MagicMock(), channel)

        with pytest.raises(SessionError):
            session.start("true")

    def test_context_manager_closes(self):
        client = MagicMock()
        channel = make_channel()

        with Session("web1", client, channel):
            pass

        channel.close.assert_called_once()
        client.close.assert_called_once()

    def test_piped_input(self):
        channel = make_channel()
        session = Session("web1", MagicMock(), channel)

        session.start("cat > /tmp/x")
        session.write(b"data")
        session.close_stdin()
        session.wait()

        channel.sendall.assert_called_once_with(b"data")
        channel.shutdown_write.assert_called_once()

    @pytest.mark.parametrize("stderr_size", [1024, 3 * 1024 * 1024])
    def test_run_with_large_stderr(self, rsa_key, stderr_size):
        """stderr 超过流控窗口时命令仍能完成"""
        client_sock, server_sock = socket.socketpair()
        server = threading.Thread(
            target=serve_exec, args=(server_sock, rsa_key, stderr_size), daemon=True
        )
        server.start()

        transport = paramiko.Transport(client_sock)
        transport.start_client(timeout=10)
        transport.auth_none("deploy")
        session = Session("web1", transport, transport.open_session())

        outputs = []
        runner = threading.Thread(
            target=lambda: outputs.append(session.run("cmd")), daemon=True
        )
        runner.start()
        runner.join(15)

        try:
            assert not runner.is_alive()
            assert outputs == ["hello\n"]
        finally:
            session.close()
            server.join(5)
