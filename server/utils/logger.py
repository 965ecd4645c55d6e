# Logging setup
# Console plus optional rotating file handler, driven by the "logging" section

import logging
import logging.handlers
import os
from typing import Dict, Any

# third-party loggers that are too chatty at DEBUG
_NOISY_LOGGERS = ('httpx', 'httpcore', 'uvicorn.access')


def _parse_size(size_str: str) -> int:
    """Parse sizes such as '10MB' -> 10485760."""
    size_str = str(size_str).strip().upper()

    if size_str.endswith('KB'):
        return int(size_str[:-2]) * 1024
    elif size_str.endswith('MB'):
        return int(size_str[:-2]) * 1024 * 1024
    elif size_str.endswith('GB'):
        return int(size_str[:-2]) * 1024 * 1024 * 1024
    else:
        return int(size_str)


def setup_logging(config: Dict[str, Any]):
    """
    Configure the root logger from the application config.

    Args:
        config: full configuration dictionary
    """
    log_config = config.get('logging', {})
    level_name = str(log_config.get('level', 'INFO')).upper()

    root = logging.getLogger()

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    root.setLevel(getattr(logging, level_name, logging.INFO))

    formatter = logging.Formatter(log_config.get('format',
        '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'))

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_config.get('file_enabled', False):
        file_path = log_config.get('file_path', 'logs/railmeal.log')
        log_dir = os.path.dirname(file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            file_path,
            maxBytes=_parse_size(log_config.get('max_file_size', '10MB')),
            backupCount=log_config.get('backup_count', 5),
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info(f"Logging initialised, level: {level_name}")
