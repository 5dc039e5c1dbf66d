# orthocds/core/logging_config.py
import logging
import os
import sys
from datetime import datetime
from typing import Optional, Dict, Any, List, TextIO


class LoggingManager:
    """Root logging setup for orthocds commands

    Progress and warning lines go to standard output (or the stream given);
    a log file is added when a path or a log directory is given. The
    ``orthocds.tools`` loggers, which echo external command lines and their
    stderr, get their own level so long runs can keep them quiet.
    """

    DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
    TOOLS_LOGGER = "orthocds.tools"

    @staticmethod
    def _level(name: Any, fallback: int = logging.INFO) -> int:
        level = logging.getLevelName(str(name).upper())
        return level if isinstance(level, int) else fallback

    @staticmethod
    def log_file_name(component: str, log_dir: str) -> str:
        """'<log_dir>/<component>_<YYYYmmdd_HHMMSS>.log'"""
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return os.path.join(log_dir, f"{component}_{stamp}.log")

    @staticmethod
    def configure(
        verbose: bool = False,
        log_file: Optional[str] = None,
        component: str = "orthocds",
        log_dir: Optional[str] = None,
        config: Optional[Dict[str, Any]] = None,
        stream: Optional[TextIO] = None
    ) -> logging.Logger:
        """Configure root logging for one command

        Args:
            verbose: DEBUG everywhere, tool loggers included
            log_file: Explicit log file path
            component: Logger name returned, and stem of generated log files
            log_dir: Directory for a generated log file (config 'log_dir' otherwise)
            config: Full configuration; only the 'logging' section is read
            stream: Console stream, sys.stdout by default

        Returns:
            The component logger
        """
        settings = (config or {}).get('logging', {})
        log_format = settings.get('format', LoggingManager.DEFAULT_FORMAT)

        level = logging.DEBUG if verbose else LoggingManager._level(settings.get('level', 'INFO'))
        tool_level = logging.DEBUG if verbose else LoggingManager._level(
            settings.get('tool_level', 'INFO'))

        handlers: List[logging.Handler] = [logging.StreamHandler(stream or sys.stdout)]
        log_dir = log_dir or settings.get('log_dir')
        if not log_file and log_dir:
            os.makedirs(log_dir, exist_ok=True)
            log_file = LoggingManager.log_file_name(component, log_dir)
        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(logging.Formatter(log_format, LoggingManager.DEFAULT_DATE_FORMAT))
            handlers.append(file_handler)

        logging.basicConfig(
            level=level,
            format=log_format,
            datefmt=LoggingManager.DEFAULT_DATE_FORMAT,
            handlers=handlers,
            force=True
        )
        logging.getLogger(LoggingManager.TOOLS_LOGGER).setLevel(tool_level)

        logger = logging.getLogger(component)
        logger.debug(f"Logging at {logging.getLevelName(level)} "
                     f"(external tools at {logging.getLevelName(tool_level)})")
        if log_file:
            logger.info(f"Writing log to {log_file}")
        return logger
