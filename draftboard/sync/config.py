"""
Configuration loader for the draft client.

Reads an optional YAML config and lets ``DRAFT_API_URL`` from the
environment (or a ``.env`` file) override the endpoint.
"""

import copy
import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

load_dotenv()

DEFAULT_CONFIG: dict = {
    "api": {"base_url": "", "timeout": 30.0},
    "sync": {"interval_seconds": 4.0, "sequenced": True},
}


def load_config(config_path: str = "config.yaml") -> dict:
    """
    Load configuration from YAML file, layered over ``DEFAULT_CONFIG``.

    A missing file is not an error: the defaults apply and the endpoint
    may still come from the environment.  An unset endpoint is reported
    later by the client, so the process can start and say so.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path, "r") as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"{config_path} must contain a mapping")
        for section, values in loaded.items():
            if isinstance(values, dict) and isinstance(config.get(section), dict):
                config[section].update(values)
            else:
                config[section] = values

    # Inject endpoint from environment
    base_url = os.getenv("DRAFT_API_URL")
    if base_url:
        config["api"]["base_url"] = base_url

    return config
