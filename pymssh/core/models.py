from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

# 失败主机在命令结果中的占位输出
ERROR_MARKER = "(error)\n"


class ExecutionStatus(Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class ClientConfig:
    """一次调用内共享的只读认证配置"""

    user: str
    auth_methods: Tuple[Any, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # 允许传入 list，统一转换为 tuple 以保证不可变
        object.__setattr__(self, "auth_methods", tuple(self.auth_methods))


@dataclass
class TaskResult:
    """单个主机的执行结果"""

    host: str
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def status(self) -> ExecutionStatus:
        return ExecutionStatus.SUCCESS if self.ok else ExecutionStatus.ERROR

    @property
    def payload(self) -> Any:
        return self.value if self.ok else ERROR_MARKER


ResultMap = Dict[str, TaskResult]


@dataclass
class HostOutcome:
    """用于序列化输出的结果视图"""

    host: str
    status: str
    output: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_result(cls, result: TaskResult) -> "HostOutcome":
        return cls(
            host=result.host,
            status=result.status.value,
            output=result.value,
            error=str(result.error) if result.error is not None else None,
        )
