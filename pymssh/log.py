"""日志配置"""

import logging
from typing import Union

LOGGER_NAME = "pymssh"


class HostFormatter(logging.Formatter):
    """带 hostname 的记录输出为 `[host] message`"""

    def format(self, record):
        message = super().format(record)
        hostname = getattr(record, "hostname", None)
        if hostname:
            return f"[{hostname}] {message}"
        return message


def setup_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(HostFormatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def get_host_logger(host: str) -> logging.LoggerAdapter:
    return logging.LoggerAdapter(
        logging.getLogger(f"{LOGGER_NAME}.host"), extra={"hostname": host}
    )
