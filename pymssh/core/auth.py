"""认证方式解析"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, Tuple

import paramiko
from paramiko.auth_strategy import AuthSource, AuthStrategy, InMemoryPrivateKey
from tenacity import wait_random

from pymssh.core.agent import MAX_JITTER, SocketAgent, dial_agent, dial_unix
from pymssh.core.keys import KeyDecryptor, Keyring, load_signer
from pymssh.core.models import ClientConfig
from pymssh.settings import Settings

logger = logging.getLogger(__name__)


class AuthMethod:
    """认证方式基类, 按顺序产出 paramiko 的 AuthSource"""

    name = "none"

    def sources(self, username: str) -> Iterator[AuthSource]:
        raise NotImplementedError


@dataclass(frozen=True)
class AgentDelegated(AuthMethod):
    """由 ssh-agent 持有私钥并完成签名"""

    agent: Any
    identities: Tuple[Any, ...] = ()

    name = "agent"

    def sources(self, username: str) -> Iterator[AuthSource]:
        for key in self.identities:
            yield InMemoryPrivateKey(username, key)


@dataclass(frozen=True)
class LocalKeyring(AuthMethod):
    """本进程持有的已解密私钥"""

    keyring: Keyring

    name = "keyring"

    def sources(self, username: str) -> Iterator[AuthSource]:
        for i in range(len(self.keyring)):
            pkey = self.keyring.key(i)
            if pkey is not None:
                yield InMemoryPrivateKey(username, pkey)


class ClientConfigStrategy(AuthStrategy):
    """按 ClientConfig 中的顺序依次尝试, 第一个成功即停止"""

    def __init__(self, config: ClientConfig):
        super().__init__(ssh_config=paramiko.SSHConfig())
        self.config = config

    def get_sources(self) -> Iterator[AuthSource]:
        for method in self.config.auth_methods:
            yield from method.sources(self.config.user)


class AuthResolver:
    """在分发之前一次性构建 ClientConfig"""

    def __init__(
        self,
        settings: Settings,
        decryptor: Optional[KeyDecryptor] = None,
        dial: Callable = dial_unix,
        agent_factory: Callable = SocketAgent,
        agent_wait=None,
    ):
        self.settings = settings
        self.decryptor = decryptor or KeyDecryptor(program=settings.decrypt_program)
        self.dial = dial
        self.agent_factory = agent_factory
        self.agent_wait = agent_wait if agent_wait is not None else wait_random(0, MAX_JITTER)

    def resolve(self) -> ClientConfig:
        methods = []

        agent = self.resolve_agent()
        if agent is not None:
            methods.append(agent)

        keyring = self.resolve_keyring()
        if keyring is not None:
            methods.append(keyring)

        logger.debug(
            "Resolved %d auth method(s) for %s: %s",
            len(methods),
            self.settings.user,
            ", ".join(m.name for m in methods) or "none",
        )
        return ClientConfig(user=self.settings.user, auth_methods=tuple(methods))

    def resolve_agent(self) -> Optional[AgentDelegated]:
        path = self.settings.agent_socket
        if not path:
            return None

        try:
            sock = dial_agent(path, dial=self.dial, wait=self.agent_wait)
        except OSError as e:
            logger.error("Cannot open connection to SSH agent: %s", e)
            return None

        try:
            agent = self.agent_factory(sock)
            identities = tuple(agent.request_identities())
        except (paramiko.SSHException, OSError) as e:
            logger.error("Cannot request identities from ssh-agent: %s", e)
            sock.close()
            return None

        if not identities:
            logger.debug("ssh-agent at %s holds no identities", path)
            agent.close()
            return None

        return AgentDelegated(agent=agent, identities=identities)

    def resolve_keyring(self) -> Optional[LocalKeyring]:
        signers = []
        for keyname in self.settings.key_files:
            signer = load_signer(keyname, self.decryptor)
            if signer is not None:
                signers.append(signer)

        if not signers:
            return None
        return LocalKeyring(Keyring(signers))
