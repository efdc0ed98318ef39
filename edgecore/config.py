"""
Configuration management for the EdgeCore journal.

Loads settings from config.yaml and environment variables.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_FILE = PROJECT_ROOT / "config.yaml"
DATA_DIR = PROJECT_ROOT / "data"


def load_config() -> dict[str, Any]:
    """Load configuration from YAML file, layered over the defaults."""
    config = get_default_config()
    if CONFIG_FILE.exists():
        with open(CONFIG_FILE, "r") as f:
            overrides = yaml.safe_load(f) or {}
        for section, values in overrides.items():
            if isinstance(values, dict) and isinstance(config.get(section), dict):
                config[section].update(values)
            else:
                config[section] = values
    return config


def get_default_config() -> dict[str, Any]:
    """Return default configuration if config.yaml doesn't exist."""
    return {
        "import": {
            "batch_size": 50,
            "min_year": 2020,
            "default_risk_percentage": 1.0,
            "header_scan_rows": 80,
            "max_upload_mb": 10,
            "no_news_markers": ["NO NEWS", "NO", "SIN NOTICIA", "SIN NOTICIAS", "NONE", "-"],
        },
        "flip_x5": {
            "account_size": 1000.0,
            "cycle_size": 2,
            "risk_per_cycle": 200.0,
            "rr_ratio": 2.0,
            "reinvest_percent": 80.0,
        },
        "rotational": {
            "number_of_accounts": 3,
            "capital_per_account": 1000.0,
            "risk_per_trade": 100.0,
            "risk_reward_ratio": 2.0,
        },
        "logging": {
            "level": "INFO",
        },
    }


def save_config(config: dict[str, Any]) -> None:
    """Save configuration to YAML file."""
    with open(CONFIG_FILE, "w") as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


class Settings:
    """Application settings singleton."""

    _instance = None
    _config: dict[str, Any] = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._config = load_config()
        return cls._instance

    def reload(self) -> None:
        """Reload configuration from file."""
        self._config = load_config()

    @property
    def import_batch_size(self) -> int:
        env_size = os.getenv("IMPORT_BATCH_SIZE")
        if env_size:
            try:
                return int(env_size)
            except ValueError:
                pass
        return self._config.get("import", {}).get("batch_size", 50)

    @property
    def min_import_year(self) -> int:
        return self._config.get("import", {}).get("min_year", 2020)

    @property
    def default_risk_percentage(self) -> float:
        return self._config.get("import", {}).get("default_risk_percentage", 1.0)

    @property
    def header_scan_rows(self) -> int:
        return self._config.get("import", {}).get("header_scan_rows", 80)

    @property
    def max_upload_bytes(self) -> int:
        return int(self._config.get("import", {}).get("max_upload_mb", 10) * 1024 * 1024)

    @property
    def no_news_markers(self) -> frozenset[str]:
        markers = self._config.get("import", {}).get("no_news_markers", ["NO NEWS"])
        return frozenset(str(m).strip().upper() for m in markers)

    @property
    def flip_defaults(self) -> dict[str, Any]:
        return dict(self._config.get("flip_x5", {}))

    @property
    def rotational_defaults(self) -> dict[str, Any]:
        return dict(self._config.get("rotational", {}))

    @property
    def log_level(self) -> str:
        env_level = os.getenv("LOG_LEVEL")
        if env_level:
            return env_level.upper()
        return str(self._config.get("logging", {}).get("level", "INFO")).upper()

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by dot-notation key."""
        keys = key.split(".")
        value = self._config
        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default
        return value if value is not None else default


# Global settings instance
settings = Settings()


# Environment variable helpers
def get_database_url() -> str:
    """Get database URL from environment or default."""
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    DATA_DIR.mkdir(exist_ok=True)
    return f"sqlite:///{DATA_DIR}/journal.db"


def get_default_owner_id() -> str | None:
    """
    Owner id stamped on records created from the CLI.

    The web API takes the owner from the request instead.
    """
    owner = os.getenv("EDGECORE_OWNER_ID", "").strip()
    return owner or None
