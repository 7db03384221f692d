"""Data access layer: cache, provider adapters, resolver, and fetch service."""
