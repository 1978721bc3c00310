"""Oura Fixture Drift Package.

Detects structural drift between stored API fixtures and live responses:
- Type signature extraction from JSON documents
- Signature comparison (added, removed and retyped fields)
- Fixture storage and drift reporting
"""

from .differ import DiffKind, FieldDiff, StructuralDiff, compare_structures, diff
from .fixture_store import FixtureLoadError, FixtureStore
from .report_generator import (
    EndpointValidation,
    FixtureReporter,
    ValidationOutcome,
    ValidationSession,
)
from .signature import ROOT_PATH, TypeSignature, TypeTag, extract

__all__ = [
    "ROOT_PATH",
    "DiffKind",
    "EndpointValidation",
    "FieldDiff",
    "FixtureLoadError",
    "FixtureReporter",
    "FixtureStore",
    "StructuralDiff",
    "TypeSignature",
    "TypeTag",
    "ValidationOutcome",
    "ValidationSession",
    "compare_structures",
    "diff",
    "extract",
]
