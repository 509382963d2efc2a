"""异常定义"""

from typing import Optional


class MsshError(Exception):
    """pymssh 所有异常的基类"""


class TransientSocketError(MsshError):
    """可重试的套接字错误（例如 EAGAIN、EINTR）"""

    def __init__(self, path: str, cause: OSError):
        super().__init__(f"{path}: {cause}")
        self.path = path
        self.cause = cause


class KeyAcquisitionError(MsshError):
    """私钥无法转换为 Signer"""

    def __init__(self, keyname: str, reason: str):
        super().__init__(f"{keyname}: {reason}")
        self.keyname = keyname
        self.reason = reason


class KeyDecryptionError(KeyAcquisitionError):
    pass


class KeyParseError(KeyAcquisitionError):
    pass


class SessionError(MsshError):
    """无法与主机建立会话"""

    def __init__(self, host: str, reason: str):
        super().__init__(f"{host}: {reason}")
        self.host = host
        self.reason = reason


class AuthenticationExhausted(SessionError):
    """所有认证方式均已失败"""


class CommandFailed(MsshError):
    """远程命令以非零状态退出"""

    def __init__(self, host: str, exit_status: int, output: str = ""):
        super().__init__(f"{host}: process exited with status {exit_status}")
        self.host = host
        self.exit_status = exit_status
        self.output = output


class UploadError(MsshError):
    """向远程标准输入写入内容失败"""

    def __init__(self, host: str, stage: str, cause: Optional[BaseException] = None):
        message = f"{host}: {stage} failed"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
        self.host = host
        self.stage = stage
        self.cause = cause


class SourceReadError(MsshError):
    """本地源文件无法读取"""

    def __init__(self, path: str, cause: OSError):
        super().__init__(f"Cannot read {path}: {cause}")
        self.path = path
        self.cause = cause
