import logging
import sys
from typing import Union

from constants import DEFAULT_LOG_LEVEL


class LoggerSetup:
    def __init__(self, log_format: str, level: Union[str, int] = DEFAULT_LOG_LEVEL):
        self.log_format = log_format
        self.level = level.upper() if isinstance(level, str) else level
        self.setup_logging()

    def setup_logging(self) -> None:
        """Setup logging configuration on the root logger.

        The Lambda runtime installs its own handler on the root logger, in
        which case only the level is applied.
        """
        root_logger = logging.getLogger()
        root_logger.setLevel(self.level)
        if not root_logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            formatter = logging.Formatter(self.log_format)
            handler.setFormatter(formatter)
            root_logger.addHandler(handler)

    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(name) if name else logging.getLogger()
