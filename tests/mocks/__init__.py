"""Mock helpers for Riskscope tests."""

from .mock_providers import (
    FakeProvider,
    make_overview,
    make_snapshot,
    make_statements,
)

__all__ = [
    "FakeProvider",
    "make_overview",
    "make_snapshot",
    "make_statements",
]
