"""Core data, scoring, and batch layers."""
