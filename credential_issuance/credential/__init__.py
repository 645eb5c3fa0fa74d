"""Credential type registries and offer construction."""
