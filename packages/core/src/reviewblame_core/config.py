import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "remote": "origin",
    "porcelain": False,
    "show_email": False,
    "line_range": None,  # passed to `git blame -L`, e.g. "10,20" or "/^def main/,+5"
    "github_api_url": "https://api.github.com",  # override for GitHub Enterprise Server
    "timeout": 30,
}


def load_config(config_path: str = ".review-blame.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .review-blame.yml in the current directory
      3. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ValueError(f"{config_path} must contain a YAML mapping, got {type(file_config).__name__}")
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Credentials only ever come from the environment, never from the file.
    config["github_token"] = os.environ.get("GITHUB_TOKEN")
    config["gitlab_token"] = os.environ.get("GITLAB_TOKEN")

    return config
