"""pymssh - parallel SSH command runner and file distributor"""

__version__ = "1.0.0"

from .core.auth import AgentDelegated, AuthResolver, LocalKeyring
from .core.dispatcher import Dispatcher
from .core.executor import CommandExecutor
from .core.keys import KeyDecryptor, Keyring, Signer
from .core.models import ClientConfig, TaskResult
from .core.session import SessionFactory
from .core.transfer import FileUploader
from .settings import Settings

__all__ = [
    "AuthResolver",
    "AgentDelegated",
    "LocalKeyring",
    "ClientConfig",
    "CommandExecutor",
    "Dispatcher",
    "FileUploader",
    "KeyDecryptor",
    "Keyring",
    "SessionFactory",
    "Settings",
    "Signer",
    "TaskResult",
]
