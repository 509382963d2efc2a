"""并行分发: 每个主机一个任务, 收集全部结果"""

import logging
import queue
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, Iterable, List, Optional

from pymssh.core.models import ResultMap, TaskResult
from pymssh.log import get_host_logger

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, TaskResult], None]


def unique_hosts(hosts: Iterable[str]) -> List[str]:
    """去重并保持原有顺序"""
    return list(dict.fromkeys(hosts))


class Dispatcher:
    """把同一个任务分发到所有主机并等待每个主机都返回结果

    没有超时、取消或并发上限: 并发度等于主机数,
    某个主机失败不会影响其他主机。
    """

    def __init__(self, progress_callback: Optional[ProgressCallback] = None):
        self.progress_callback = progress_callback

    def _task(self, host: str, work: Callable, results: "queue.Queue[TaskResult]") -> None:
        try:
            result = TaskResult(host=host, value=work(host))
        except Exception as e:
            get_host_logger(host).error("Error at %s: %s", host, e)
            result = TaskResult(host=host, error=e)
        results.put(result)

    def run(self, hosts: Iterable[str], work: Callable[[str], object]) -> ResultMap:
        targets = unique_hosts(hosts)
        if not targets:
            return {}

        logger.debug("Dispatching to %d host(s)", len(targets))
        results: "queue.Queue[TaskResult]" = queue.Queue()
        collected: Dict[str, TaskResult] = {}
        total = len(targets)

        with ThreadPoolExecutor(max_workers=total) as executor:
            for host in targets:
                executor.submit(self._task, host, work, results)

            for completed in range(1, total + 1):
                result = results.get()
                collected[result.host] = result
                if self.progress_callback:
                    self.progress_callback(completed, total, result)

        return {host: collected[host] for host in targets}
