import json
import os
from datetime import datetime

DEFAULT_CONFIG_PATH = "config/runtime_config.json"

DEFAULT_CONFIG = {
    "max_steps": 10_000,
    "trace_limit": 200,
    "machines_directory": "machines/",
    "output_directory": "logs/",
    "log_file_prefix": "turing_",
    "results_directory": "results/",
    "log_runs": True
}

# Expected types for validation
CONFIG_SCHEMA = {
    "max_steps": int,
    "trace_limit": int,
    "machines_directory": str,
    "output_directory": str,
    "log_file_prefix": str,
    "results_directory": str,
    "log_runs": bool
}

POSITIVE_KEYS = ["max_steps", "trace_limit"]

def validate_config(config):
    for key, expected_type in CONFIG_SCHEMA.items():
        if key not in config:
            raise ValueError(f"Missing required configuration key: {key}")
        # bool is an int subclass, so True would pass as a step bound
        if isinstance(config[key], bool) and expected_type is not bool:
            raise TypeError(f"Config key '{key}' expected {expected_type}, got {type(config[key])}.")
        if not isinstance(config[key], expected_type):
            raise TypeError(f"Config key '{key}' expected {expected_type}, got {type(config[key])}.")

    for key in POSITIVE_KEYS:
        if config[key] <= 0:
            raise ValueError(f"Config key '{key}' must be positive, got {config[key]}.")

def load_config(path=DEFAULT_CONFIG_PATH, verbose=True):
    if not os.path.exists(path):
        raise FileNotFoundError(f"Configuration file not found at: {path}")

    with open(path, "r", encoding="utf-8") as f:
        user_config = json.load(f)

    # Merge defaults with overrides
    config = DEFAULT_CONFIG.copy()
    config.update(user_config)

    # Validate schema
    validate_config(config)

    # Validate output directory
    os.makedirs(config["output_directory"], exist_ok=True)

    if verbose:
        print(f"[{datetime.now()}] Loaded config:")
        for key, value in config.items():
            print(f"  {key}: {value}")

    return config

def save_config(config, path=DEFAULT_CONFIG_PATH):
    validate_config(config)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=4)
