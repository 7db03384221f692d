"""Centralized formatting utilities for CLI output.

Provides consistent colors and number formatting across all CLI commands.
"""

from typing import Optional

from rich.console import Console

# Panel/Table padding standards
PANEL_PADDING = (1, 2)

BORDER_PRIMARY = "blue"      # Main content panels
BORDER_WARNING = "yellow"    # Warning panels
BORDER_ERROR = "red"         # Error/alert panels

# Missing value indicator
MISSING = "-"


def get_zone_color(zone: Optional[str]) -> str:
    """Get Rich color based on Altman zone."""
    colors = {
        "Safe": "green",
        "Grey": "yellow",
        "Distress": "red",
        "Unknown": "dim",
    }
    return colors.get(zone or "", "white")


def get_zscore_verdict(zone: Optional[str]) -> tuple[str, str]:
    """
    Get plain English verdict for Z-Score.

    Returns:
        Tuple of (verdict_text, color)
    """
    verdicts = {
        "Safe": ("Low Bankruptcy Risk", "green"),
        "Grey": ("Uncertain Risk", "yellow"),
        "Distress": ("High Bankruptcy Risk", "red"),
    }
    return verdicts.get(zone or "", ("Cannot Be Scored", "dim"))


def get_risk_color(level: str) -> str:
    """Color for High/Medium/Low tiers where High is bad (portfolio risk)."""
    return {"High": "red", "Medium": "yellow", "Low": "green"}.get(level, "white")


def get_quality_color(tier: str) -> str:
    """Color for High/Medium/Low tiers where High is good (data quality, confidence)."""
    return {"High": "green", "Medium": "yellow", "Low": "red"}.get(tier, "white")


def get_insight_color(kind: str) -> str:
    return {"positive": "green", "info": "cyan", "warning": "yellow", "danger": "red"}.get(kind, "white")


def format_z_score(z_score: Optional[float]) -> str:
    return MISSING if z_score is None else f"{z_score:.2f}"


def format_large_number(value: Optional[float]) -> str:
    """Format currency amounts as $1.23T / $4.56B / $7.89M."""
    if not value:
        return MISSING
    magnitude = abs(value)
    for threshold, suffix in ((1e12, "T"), (1e9, "B"), (1e6, "M"), (1e3, "K")):
        if magnitude >= threshold:
            return f"${value / threshold:.2f}{suffix}"
    return f"${value:,.0f}"


def format_ratio(value: float, percent: bool = False) -> str:
    return f"{value:.1f}%" if percent else f"{value:.2f}"


def print_next_steps(console: Console, steps: list[tuple[str, str]]) -> None:
    """
    Print standardized next-step hints.

    Args:
        console: Rich console instance
        steps: List of (label, command) tuples
    """
    console.print()
    console.print("[dim]Next steps:[/dim]")
    for label, cmd in steps:
        console.print(f"  [dim]{label}:[/dim]  {cmd}")
