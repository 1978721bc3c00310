"""Centralized path configuration for the fixture tooling.

Provides a singleton PathConfig class that resolves fixture, report and
config locations from config/paths.yaml, falling back to built-in defaults.
"""

import logging
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)


class PathConfig:
    """Centralized configuration for all tooling paths.

    Implements singleton pattern for efficiency and consistency.
    Reads from config/paths.yaml with sensible defaults.
    """

    _instance: Optional["PathConfig"] = None
    _initialized: bool = False

    DEFAULTS: dict[tuple[str, ...], str] = {
        ("fixtures", "directory"): "tests/fixtures",
        ("reports", "directory"): "reports",
        ("reports", "fixture_report"): "fixture-validation.md",
        ("reports", "fixture_report_json"): "fixture-validation.json",
        ("config", "directory"): "config",
        ("config", "fixtures"): "config/fixtures.yaml",
    }

    def __new__(cls, config_path: Path | None = None) -> "PathConfig":
        """Implement singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False  # noqa: SLF001
        return cls._instance

    def __init__(self, config_path: Path | None = None) -> None:
        """Initialize path configuration from YAML file.

        Args:
            config_path: Path to config/paths.yaml. Defaults to config/paths.yaml
                        relative to project root.
        """
        if self._initialized:
            return

        self.config_path = (
            config_path or Path(__file__).parent.parent.parent / "config" / "paths.yaml"
        )
        self.config: dict[str, object] = {}
        self._load_config()
        self._initialized = True

    @classmethod
    def reset(cls) -> None:
        """Drop the cached instance so the next call reloads configuration."""
        cls._instance = None

    def _load_config(self) -> None:
        """Load path configuration from YAML file."""
        try:
            with self.config_path.open() as f:
                self.config = yaml.safe_load(f) or {}
                logger.info("Loaded path configuration from %s", self.config_path)
        except FileNotFoundError:
            logger.warning("Config file not found: %s. Using defaults.", self.config_path)
            self.config = {}
        except yaml.YAMLError:
            logger.exception("Error parsing path configuration")
            self.config = {}

    def _get_path(self, *keys: str) -> str:
        """Get a path value from config by nested keys.

        Args:
            *keys: Keys in nested structure (e.g., "reports", "directory")

        Returns:
            Path string value from config or default fallback
        """
        value: object = self.config
        for key in keys:
            if isinstance(value, dict):
                value = value.get(key)
            else:
                value = None
                break

        if isinstance(value, str):
            return value

        return self.DEFAULTS.get(tuple(keys), "")

    @property
    def fixtures_dir(self) -> Path:
        """Directory holding stored API response fixtures."""
        return Path(self._get_path("fixtures", "directory"))

    @property
    def reports_dir(self) -> Path:
        """Directory for generated reports."""
        return Path(self._get_path("reports", "directory"))

    @property
    def fixture_report(self) -> Path:
        """Path to fixture validation report (markdown)."""
        return self.reports_dir / self._get_path("reports", "fixture_report")

    @property
    def fixture_report_json(self) -> Path:
        """Path to fixture validation report (JSON)."""
        return self.reports_dir / self._get_path("reports", "fixture_report_json")

    @property
    def config_dir(self) -> Path:
        """Directory containing configuration files."""
        return Path(self._get_path("config", "directory"))

    @property
    def fixtures_config(self) -> Path:
        """Path to fixture validation configuration."""
        return Path(self._get_path("config", "fixtures"))

    def ensure_report_dir_exists(self) -> Path:
        """Ensure reports directory exists and return its path."""
        self.reports_dir.mkdir(parents=True, exist_ok=True)
        return self.reports_dir
