# portscout/configuration.py

"""
Configuration loader for portscout.

Handles loading settings from config.yaml. If the file doesn't exist,
it creates one with default values.
"""

import copy
import sys
import yaml
from typing import Dict, Any, Optional

# This dictionary holds the default structure and values for our config.
# It will be used to generate the initial config.yaml.
DEFAULT_CONFIG = {
    'probe_timeout_seconds': 3,
    'max_concurrency': 1000,
    'start_port': 1,
    'end_port': 65535,
    'services_db_path': 'services.db',
    # Logging
    'log_level': 'WARNING',
    'log_file': None,            # Log to this file instead of stderr
    # Keys that end the scan early. Ctrl+C always does.
    'quit_keys': ['q'],
}

CONFIG_HEADER = (
    "# portscout Configuration File\n"
    "# You can edit these settings. Command line flags take precedence.\n\n"
)

def get_config_path() -> str:
    """Returns the path to the config file."""
    return "config.yaml"

def _write_config(config: Dict[str, Any], config_path: str):
    with open(config_path, 'w') as f:
        f.write(CONFIG_HEADER)
        yaml.dump(config, f, sort_keys=False, default_flow_style=False, indent=2)

def save_config(config: Dict[str, Any], config_path: Optional[str] = None):
    """Saves the provided configuration dictionary to config.yaml."""
    config_path = config_path or get_config_path()
    try:
        _write_config(config, config_path)
    except IOError as e:
        print(f"ERROR: Could not write config file to '{config_path}': {e}", file=sys.stderr)

def load_or_create_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Loads configuration from config.yaml.

    If the file doesn't exist, it creates it with default values.
    If the file is invalid, it reports the error and exits.
    """
    config_path = config_path or get_config_path()
    try:
        with open(config_path, 'r') as f:
            user_config = yaml.safe_load(f)

        # Merge user config with defaults to ensure all keys are present
        config = copy.deepcopy(DEFAULT_CONFIG)
        if isinstance(user_config, dict):
            config.update(user_config)
        elif user_config is not None:
            print(f"FATAL: '{config_path}' must contain a mapping of settings.", file=sys.stderr)
            sys.exit(1)
        return config

    except FileNotFoundError:
        try:
            _write_config(DEFAULT_CONFIG, config_path)
        except IOError as e:
            print(f"FATAL: Could not write default config file to '{config_path}': {e}", file=sys.stderr)
            sys.exit(1)
        return copy.deepcopy(DEFAULT_CONFIG)

    except yaml.YAMLError as e:
        print(f"FATAL: Error parsing '{config_path}': {e}", file=sys.stderr)
        sys.exit(1)
