"""xypoker/logging_setup.py

Per-run logging: a rotating file log plus a rich console handler.
"""

import datetime
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import Config


def setup_logging(
    config: Config, verbose: bool = False, console: Optional[Console] = None
) -> Optional[str]:
    """Configures the root logger. Returns the run log directory, or None."""
    log_level_file_str = config.logging.log_level_file.upper()
    log_level_console_str = "DEBUG" if verbose else config.logging.log_level_console.upper()

    file_log_level_value = getattr(logging, log_level_file_str, logging.DEBUG)
    console_log_level_value = getattr(logging, log_level_console_str, logging.WARNING)

    main_log_dir = config.logging.log_dir
    log_prefix = config.logging.log_file_prefix

    if not main_log_dir or not isinstance(main_log_dir, str):
        print(f"ERROR: Invalid log directory '{main_log_dir}'. Logging disabled.")
        return None

    # Create Run Directory
    run_timestamp = datetime.datetime.now().strftime("%Y_%m_%d_%H%M%S")
    run_log_dir = os.path.join(main_log_dir, f"{log_prefix}_run_{run_timestamp}")
    try:
        os.makedirs(run_log_dir, exist_ok=True)
    except OSError as e:
        print(f"ERROR: Could not create log directory '{run_log_dir}': {e}. Logging disabled.")
        return None

    # Create Handlers
    formatter = logging.Formatter(
        "%(asctime)s - %(levelname)-8s - %(name)-25s - %(message)s"
    )
    handlers: List[logging.Handler] = []

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        show_level=True,
        show_path=False,
        rich_tracebacks=False,
        level=console_log_level_value,
    )
    handlers.append(console_handler)

    main_log_file = os.path.join(run_log_dir, f"{log_prefix}_run_{run_timestamp}.log")
    try:
        fh = RotatingFileHandler(
            main_log_file,
            maxBytes=config.logging.log_max_bytes,
            backupCount=config.logging.log_backup_count,
            encoding="utf-8",
        )
        fh.setLevel(file_log_level_value)
        fh.setFormatter(formatter)
        handlers.append(fh)
    except OSError as e:
        print(f"ERROR: Could not set up file logging: {e}")
        main_log_file = "File logging disabled"

    # Configure Root Logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root_logger.addHandler(handler)

    initial_logger = logging.getLogger(__name__)
    initial_logger.info("-" * 50)
    initial_logger.info("Logging initialized for run: %s", run_timestamp)
    initial_logger.info("Run Log Directory: %s", run_log_dir)
    initial_logger.info(
        "Main Log File: %s (Level: %s)",
        main_log_file,
        logging.getLevelName(file_log_level_value),
    )
    initial_logger.info("Console Level: %s", logging.getLevelName(console_log_level_value))
    initial_logger.info("Command: %s", " ".join(sys.argv))
    initial_logger.info("-" * 50)

    # Reduce Verbosity from Libraries
    logging.getLogger("joblib").setLevel(logging.WARNING)

    return run_log_dir
