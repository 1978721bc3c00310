"""Base reporter class for report generators.

Provides abstract base class and common utilities for generating both
markdown and JSON reports consistently.
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .path_config import PathConfig

logger = logging.getLogger(__name__)


class BaseReporter(ABC):
    """Abstract base class for report generators.

    Provides:
    - Metadata standardization
    - Markdown table and section generation
    - Dual format support (markdown + JSON)
    - Common path management via PathConfig
    """

    def __init__(
        self,
        title: str,
        description: str,
        path_config: PathConfig | None = None,
    ) -> None:
        """Initialize the reporter.

        Args:
            title: Report title for display
            description: Report description
            path_config: Optional PathConfig instance (creates new if not provided)
        """
        self.title = title
        self.description = description
        self.path_config = path_config or PathConfig()
        self.generated_at = datetime.now(tz=timezone.utc).isoformat()

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Convert report to dictionary format."""

    @abstractmethod
    def to_markdown(self) -> str:
        """Convert report to markdown format."""

    def generate_all(self, markdown_path: Path, json_path: Path) -> tuple[Path, Path]:
        """Generate both markdown and JSON reports.

        Args:
            markdown_path: Where to write markdown report
            json_path: Where to write JSON report

        Returns:
            Tuple of (markdown_path, json_path)
        """
        self.generate_markdown(markdown_path)
        self.generate_json(json_path)
        logger.info("Generated reports: %s and %s", markdown_path, json_path)
        return markdown_path, json_path

    def generate_markdown(self, path: Path) -> None:
        """Write markdown report to file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w") as f:
            f.write(self.to_markdown())
        logger.info("Generated markdown report: %s", path)

    def generate_json(self, path: Path) -> None:
        """Write JSON report to file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w") as f:
            json.dump(self.to_dict(), f, indent=2)
            f.write("\n")
        logger.info("Generated JSON report: %s", path)

    # Markdown helpers
    @staticmethod
    def markdown_section(title: str, content: str, level: int = 2) -> str:
        """Create a markdown section with heading and content.

        Args:
            title: Section title
            content: Section content
            level: Heading level (2 = ##, 3 = ###, etc)
        """
        heading = "#" * level
        return f"{heading} {title}\n\n{content}\n\n"

    @staticmethod
    def markdown_table(
        headers: list[str],
        rows: list[list[str]],
    ) -> str:
        """Create a markdown table.

        Args:
            headers: Column headers
            rows: List of rows, each row is list of cell values

        Returns:
            Formatted markdown table, or an empty string without headers or rows
        """
        if not headers or not rows:
            return ""

        md = "| " + " | ".join(headers) + " |\n"
        md += "| " + " | ".join(["---"] * len(headers)) + " |\n"
        for row in rows:
            md += "| " + " | ".join(str(cell) for cell in row) + " |\n"

        return md + "\n"

    @staticmethod
    def markdown_code_block(lines: list[str], language: str = "") -> str:
        """Wrap lines in a fenced code block."""
        body = "\n".join(lines)
        return f"```{language}\n{body}\n```\n"

    def markdown_report_header(self) -> str:
        """Create standard report header with title, description, and timestamp."""
        md = f"# {self.title}\n\n"
        md += f"{self.description}\n\n"
        md += f"**Generated**: {self.generated_at}\n\n"
        return md
