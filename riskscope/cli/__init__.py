"""Command-line interface for Riskscope."""
