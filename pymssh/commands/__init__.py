"""命令行命令模块"""

from .execute import execute_command
from .file import upload_command
from .version import version_command

__all__ = ["execute_command", "upload_command", "version_command"]
