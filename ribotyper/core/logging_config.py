# ribotyper/core/logging_config.py
import logging
import os
from datetime import datetime
from typing import Optional, Dict, Any, List


class LoggingManager:
    """Root logger setup for ribotyper commands"""

    DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

    @staticmethod
    def log_file_for(component: str, log_dir: str) -> str:
        """Timestamped log file name inside log_dir"""
        os.makedirs(log_dir, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return os.path.join(log_dir, f"{component}_{stamp}.log")

    @staticmethod
    def configure(
        verbose: bool = False,
        log_file: Optional[str] = None,
        component: str = "ribotyper",
        log_dir: Optional[str] = None,
        config: Optional[Dict[str, Any]] = None
    ) -> logging.Logger:
        """Send log records to stderr and optionally to a file

        Args:
            verbose: Force DEBUG level
            log_file: Log file path
            component: Logger name, also used to name automatic log files
            log_dir: Directory for an automatically named log file
            config: Configuration whose 'logging' section supplies
                level, format and log_dir defaults

        Returns:
            Logger for the component
        """
        settings = (config or {}).get('logging') or {}
        log_format = settings.get('format') or LoggingManager.DEFAULT_FORMAT
        if verbose:
            level = logging.DEBUG
        else:
            level = getattr(logging, str(settings.get('level', 'INFO')).upper(), logging.INFO)

        log_dir = log_dir or settings.get('log_dir')
        if not log_file and log_dir:
            log_file = LoggingManager.log_file_for(component, log_dir)

        handlers: List[logging.Handler] = [logging.StreamHandler()]
        if log_file:
            handlers.append(logging.FileHandler(log_file))

        logging.basicConfig(level=level, format=log_format, datefmt=LoggingManager.DATE_FORMAT,
                            handlers=handlers, force=True)

        logger = logging.getLogger(component)
        logger.debug(f"Logging at {logging.getLevelName(level)}")
        if log_file:
            logger.info(f"Logging to {log_file}")
        return logger
