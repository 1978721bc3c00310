"""Report generation for fixture validation runs.

Generates:
- reports/fixture-validation.md - Human-readable summary with drift lines
- reports/fixture-validation.json - Machine-readable session results
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from ..utils.path_config import PathConfig
from ..utils.report_base import BaseReporter
from .differ import StructuralDiff


class ValidationOutcome(Enum):
    """Outcome of validating one endpoint's fixture."""

    MATCHED = "matched"
    DRIFTED = "drifted"
    CREATED = "created"  # No usable fixture; written from the live response
    ERROR = "error"


@dataclass
class EndpointValidation:
    """Validation result for a single endpoint."""

    endpoint: str
    fixture: str
    outcome: ValidationOutcome
    diff: StructuralDiff | None = None
    error: str | None = None
    response_time_ms: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        result: dict[str, Any] = {
            "endpoint": self.endpoint,
            "fixture": self.fixture,
            "outcome": self.outcome.value,
        }
        if self.diff is not None:
            result["diff"] = self.diff.to_dict()
        if self.error:
            result["error"] = self.error
        if self.response_time_ms is not None:
            result["response_time_ms"] = round(self.response_time_ms, 2)
        return result


@dataclass
class ValidationSession:
    """Results of one fixture validation run."""

    start_date: str = ""
    end_date: str = ""
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: datetime | None = None
    results: list[EndpointValidation] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        end = self.completed_at or datetime.now(timezone.utc)
        return (end - self.started_at).total_seconds()

    def count(self, outcome: ValidationOutcome) -> int:
        return len([r for r in self.results if r.outcome is outcome])

    @property
    def has_drift(self) -> bool:
        return self.count(ValidationOutcome.DRIFTED) > 0

    @property
    def has_errors(self) -> bool:
        return self.count(ValidationOutcome.ERROR) > 0


class FixtureReporter(BaseReporter):
    """Reporter for fixture validation sessions."""

    def __init__(
        self,
        session: ValidationSession,
        path_config: PathConfig | None = None,
    ) -> None:
        super().__init__(
            title="Oura API Fixture Validation",
            description="Structural comparison of stored fixtures with live Oura API responses",
            path_config=path_config,
        )
        self.session = session

    def generate_all(
        self,
        markdown_path: Path | None = None,
        json_path: Path | None = None,
    ) -> tuple[Path, Path]:
        """Generate both reports, defaulting to the configured report paths."""
        return super().generate_all(
            markdown_path or self.path_config.fixture_report,
            json_path or self.path_config.fixture_report_json,
        )

    def _summary(self) -> dict[str, int]:
        return {outcome.value: self.session.count(outcome) for outcome in ValidationOutcome}

    def to_dict(self) -> dict[str, Any]:
        """Convert validation session to dictionary."""
        return {
            "timestamp": self.generated_at,
            "date_range": {
                "start_date": self.session.start_date,
                "end_date": self.session.end_date,
            },
            "duration_seconds": round(self.session.duration_seconds, 2),
            "summary": {"total": len(self.session.results), **self._summary()},
            "endpoints": [r.to_dict() for r in self.session.results],
        }

    def to_markdown(self) -> str:
        """Convert validation session to markdown."""
        md = self.markdown_report_header()
        md += f"**Date range**: {self.session.start_date} to {self.session.end_date}\n\n"

        rows = [[outcome.title(), str(n)] for outcome, n in self._summary().items()]
        rows.append(["Total", str(len(self.session.results))])
        md += self.markdown_section("Summary", self.markdown_table(["Outcome", "Endpoints"], rows))

        endpoint_rows = [
            [r.endpoint, r.fixture, r.outcome.value, str(len(r.diff)) if r.diff else "0"]
            for r in self.session.results
        ]
        if endpoint_rows:
            md += self.markdown_section(
                "Endpoints",
                self.markdown_table(["Endpoint", "Fixture", "Outcome", "Differences"], endpoint_rows),
            )

        for result in self.session.results:
            if result.outcome is ValidationOutcome.DRIFTED and result.diff:
                md += self.markdown_section(
                    f"Drift: {result.endpoint}",
                    self.markdown_code_block(result.diff.lines(), "diff"),
                    level=3,
                )
            elif result.outcome is ValidationOutcome.ERROR:
                md += self.markdown_section(f"Error: {result.endpoint}", result.error or "", level=3)

        return md
