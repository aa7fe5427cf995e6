"""Logging context and configuration helpers."""
