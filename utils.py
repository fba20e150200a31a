# utils.py
"""
Utility functions for the particle background.

This module provides helper functions, such as logging setup and config
loading, that are used across the application but do not belong to the
simulation, scheduling or rendering layers.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary containing a "logging" key with "level",
#       "format", and "log_file" sub-keys. All sub-keys are optional.
#   - Outputs: None
#   - Side Effects: Configures the root Python logger. Creates a log
#     directory if it doesn't exist. Sets up a console handler and a
#     rotating file handler.
#   - Invariants: After this function runs, the logging system is
#     initialized and ready for use throughout the application.
#
# load_config(path: str, required: bool = True) -> Dict[str, Any]:
#   - Inputs: path to a JSON file.
#   - Outputs: the parsed JSON object.
#   - Errors: json.JSONDecodeError is logged and re-raised, as is
#     FileNotFoundError when `required`. A non-object root raises
#     ValueError.
#
# config_section(config, name) -> Dict[str, Any]:
#   - Outputs: the named section, or {} when absent or null.

def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Sets up logging to both the console and a rotating file.
    """
    log_config = config_section(config, 'logging')
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file', 'logs/particle_background.log')

    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Rotates when the log reaches 1MB, keeps 5 backup logs.
    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path, maxBytes=1024*1024, backupCount=5
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path}")

def load_config(path: str, required: bool = True) -> Dict[str, Any]:
    """
    Loads a JSON configuration file.

    When `required` is False a missing file is not an error: a warning is
    logged and an empty configuration is returned, so every section falls
    back to its defaults. Malformed JSON is always an error.
    """
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        if not required:
            logging.warning(f"Configuration file not found at {path}. Using defaults.")
            return {}
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise

    if not isinstance(config, dict):
        raise ValueError(f"Configuration root in {path} must be a JSON object.")
    logging.info("Configuration loaded successfully.")
    return config

def config_section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Returns a config section, treating a missing or null section as empty."""
    section = config.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Configuration section '{name}' must be a JSON object.")
    return section
