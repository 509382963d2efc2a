import logging

import paramiko
import pytest

from pymssh.log import LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_logging():
    """CLI 会安装 handler, 测试之间需要还原"""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture(scope="session")
def rsa_key():
    return paramiko.RSAKey.generate(2048)
