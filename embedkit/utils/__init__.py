"""Shared utilities: configuration and logging setup."""
