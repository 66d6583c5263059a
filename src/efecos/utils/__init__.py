"""Shared utilities: logging, formatting and data loading."""
