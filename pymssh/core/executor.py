"""远程命令执行"""

import logging
from typing import Iterable, Optional

from pymssh.core.dispatcher import Dispatcher
from pymssh.core.models import ResultMap
from pymssh.core.session import SessionFactory
from pymssh.log import get_host_logger


class CommandExecutor:
    """在每个主机上运行同一条命令并收集标准输出"""

    def __init__(self, sessions: SessionFactory, dispatcher: Optional[Dispatcher] = None):
        self.sessions = sessions
        self.dispatcher = dispatcher or Dispatcher()
        self.logger = logging.getLogger(__name__)

    def execute(self, host: str, command: str) -> str:
        """在单个主机上执行命令, 非零退出码抛出 CommandFailed"""
        with self.sessions.open(host) as session:
            output = session.run(command)
        get_host_logger(host).debug("command finished: %r", command)
        return output

    def execute_parallel(self, hosts: Iterable[str], command: str) -> ResultMap:
        self.logger.debug("Executing %r", command)
        return self.dispatcher.run(hosts, lambda host: self.execute(host, command))
