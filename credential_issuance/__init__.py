"""Credential interaction descriptor service."""

__version__ = "0.1.0"
