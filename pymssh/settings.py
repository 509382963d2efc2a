"""运行配置: 环境变量 + 可选的 YAML 配置文件"""

import dataclasses
import getpass
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple

import marshmallow
import marshmallow_dataclass
import yaml

# 用于存储 pymssh 相关文件的主目录
MAIN_DIR = os.path.join(os.path.expanduser("~"), ".pymssh")
DEFAULT_CONFIG_FILE = os.path.join(MAIN_DIR, "config.yaml")

DEFAULT_PORT = 22
DEFAULT_KEY_NAMES = ("id_rsa", "id_dsa")
OUTPUT_MODES = ("plain", "table", "json", "yaml", "template")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class SettingsError(ValueError):
    pass


@dataclass
class FileSettings:
    """配置文件中允许出现的字段"""

    port: Optional[int] = None
    user: Optional[str] = None
    decrypt_program: Optional[str] = None
    log_level: Optional[str] = field(
        default=None,
        metadata={
            "validate": marshmallow.validate.OneOf(
                LOG_LEVELS + tuple(level.lower() for level in LOG_LEVELS)
            )
        },
    )
    output: Optional[str] = field(
        default=None,
        metadata={"validate": marshmallow.validate.OneOf(OUTPUT_MODES)},
    )
    known_hosts: Optional[str] = None


FileSettingsSchema = marshmallow_dataclass.class_schema(FileSettings)


def _login_name(environ: Mapping[str, str]) -> str:
    return environ.get("LOGNAME") or environ.get("USER") or getpass.getuser()


@dataclass(frozen=True)
class Settings:
    user: str
    home: str
    agent_socket: Optional[str] = None
    port: int = DEFAULT_PORT
    decrypt_program: str = "ssh-keygen"
    log_level: str = "INFO"
    output: str = "plain"
    known_hosts: Optional[str] = None

    @property
    def key_files(self) -> Tuple[str, ...]:
        return tuple(
            os.path.join(self.home, ".ssh", name) for name in DEFAULT_KEY_NAMES
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        environ = os.environ if environ is None else environ
        return cls(
            user=_login_name(environ),
            home=environ.get("HOME") or os.path.expanduser("~"),
            agent_socket=environ.get("SSH_AUTH_SOCK") or None,
        )

    def merge(self, **overrides) -> "Settings":
        """返回覆盖了非 None 字段的新 Settings"""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes)


def load_file_settings(path) -> FileSettings:
    try:
        with open(path) as fh:
            data = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as e:
        raise SettingsError(f"{path}: {e}") from e
    if not isinstance(data, dict):
        raise SettingsError(f"{path}: expected a mapping at top level")
    try:
        return FileSettingsSchema().load(data)
    except marshmallow.ValidationError as e:
        raise SettingsError(f"{path}: {e.messages}") from e


def load_settings(
    config_file: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides,
) -> Settings:
    """环境变量 < 配置文件 < 命令行参数"""
    settings = Settings.from_env(environ)

    path = config_file or DEFAULT_CONFIG_FILE
    if config_file or Path(path).exists():
        file_settings = load_file_settings(path)
        settings = settings.merge(**dataclasses.asdict(file_settings))

    return settings.merge(**overrides)
