"""On-disk storage for API response fixtures.

Fixtures are plain JSON documents, one file per monitored endpoint.
"""

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class FixtureLoadError(Exception):
    """Raised when a fixture is missing or is not valid JSON."""


class FixtureStore:
    """Load and save JSON fixtures in a single directory."""

    def __init__(self, fixtures_dir: Path | str, pretty_print: bool = True) -> None:
        """Initialize fixture store.

        Args:
            fixtures_dir: Directory holding fixture files
            pretty_print: Indent written fixtures
        """
        self.fixtures_dir = Path(fixtures_dir)
        self.pretty_print = pretty_print

    def path_for(self, name: str) -> Path:
        """Resolve a fixture file name inside the fixtures directory.

        Raises:
            ValueError: If the name would escape the fixtures directory
        """
        relative = Path(name)
        if relative.is_absolute() or ".." in relative.parts:
            raise ValueError(f"Fixture name must be relative to {self.fixtures_dir}: {name}")
        return self.fixtures_dir / relative

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def load(self, name: str) -> Any:
        """Load a fixture.

        Returns:
            Parsed JSON, which may itself be ``None`` for a ``null`` document

        Raises:
            FixtureLoadError: If the fixture is missing or unparsable
        """
        path = self.path_for(name)
        if not self.exists(name):
            logger.warning("Fixture not found: %s", path)
            raise FixtureLoadError(f"Fixture not found: {path}")
        try:
            with path.open(encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Fixture %s is not valid JSON: %s", path, e)
            raise FixtureLoadError(f"Fixture {path} is not valid JSON: {e}") from e

    def save(self, name: str, data: Any) -> Path:
        """Write a fixture, creating the directory if needed.

        Returns:
            Path of the written fixture
        """
        path = self.path_for(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            if self.pretty_print:
                json.dump(data, f, indent=2)
            else:
                json.dump(data, f)
            f.write("\n")
        logger.info("Wrote fixture: %s", path)
        return path
