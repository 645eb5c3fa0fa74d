"""Claims metadata registry.

Maps the credential type names clients use in request flows to their
canonical metadata. The registry is loaded once at start-up from a JSON
source of the form::

    {
        "ProofOfAge": {
            "type": "ProofOfAgeCredential",
            "name": "Proof of age",
            "fields": ["dateOfBirth", "ageOver18"]
        }
    }

and is read-only afterwards.
"""
import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Optional

from credential_issuance import config
from credential_issuance.core.exceptions import (
    RegistryLoadError,
    UnknownCredentialTypeError,
)

log = logging.getLogger(__name__)

REGISTRY_NAME = "claims metadata"


@dataclass(frozen=True)
class ClaimsMetadata:
    """Canonical description of a credential type."""

    type: str  # Canonical type identifier
    name: Optional[str] = None  # Human-readable name
    fields: tuple[str, ...] = ()  # Claim fields carried by the credential


class ClaimsMetadataProvider:
    """Immutable lookup of claims metadata by credential type name."""

    def __init__(self, entries: Mapping[str, ClaimsMetadata]):
        self._entries = MappingProxyType(dict(entries))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ClaimsMetadataProvider":
        """Build the registry from decoded JSON.

        Raises:
            RegistryLoadError: An entry is malformed.
        """
        if not isinstance(data, Mapping):
            raise RegistryLoadError("Claims metadata source must be an object")

        entries = {}
        for type_name, raw in data.items():
            if not isinstance(raw, Mapping):
                raise RegistryLoadError(f"Claims metadata for {type_name} must be an object")
            canonical = raw.get("type")
            if not isinstance(canonical, str) or not canonical:
                raise RegistryLoadError(f"Claims metadata for {type_name} is missing 'type'")
            fields = raw.get("fields", [])
            if not isinstance(fields, list) or not all(isinstance(f, str) for f in fields):
                raise RegistryLoadError(
                    f"Claims metadata for {type_name}: 'fields' must be a list of strings"
                )
            entries[type_name] = ClaimsMetadata(
                type=canonical,
                name=raw.get("name"),
                fields=tuple(fields),
            )
        return cls(entries)

    @classmethod
    def from_file(cls, path: Path) -> "ClaimsMetadataProvider":
        """Load the registry from a JSON file."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise RegistryLoadError(f"Cannot load claims metadata from {path}: {e}") from e

        provider = cls.from_mapping(data)
        log.info(f"Loaded {len(provider)} claims metadata entries from {path}")
        return provider

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._entries

    @property
    def types(self) -> list[str]:
        """Registered type names, sorted."""
        return sorted(self._entries)

    def find_by_type(self, type_name: str) -> Optional[ClaimsMetadata]:
        """Look up metadata, returning None for unknown types."""
        return self._entries.get(type_name)

    def get_by_type(self, type_name: str) -> ClaimsMetadata:
        """Look up metadata.

        Raises:
            UnknownCredentialTypeError: Type is not registered.
        """
        metadata = self.find_by_type(type_name)
        if metadata is None:
            raise UnknownCredentialTypeError(type_name, REGISTRY_NAME)
        return metadata

    def resolve_all(self, type_names: Iterable[str]) -> list[ClaimsMetadata]:
        """Look up a batch of types; any unknown type fails the whole batch."""
        found = [(type_name, self.find_by_type(type_name)) for type_name in type_names]
        for type_name, metadata in found:
            if metadata is None:
                raise UnknownCredentialTypeError(type_name, REGISTRY_NAME)
        return [metadata for _, metadata in found]


# Module-level singleton
_metadata_provider: Optional[ClaimsMetadataProvider] = None


def get_claims_metadata_provider() -> ClaimsMetadataProvider:
    """Get or load the claims metadata registry singleton."""
    global _metadata_provider
    if _metadata_provider is None:
        _metadata_provider = ClaimsMetadataProvider.from_file(config.CLAIMS_METADATA_FILE)
    return _metadata_provider


def reset_claims_metadata_provider() -> None:
    """Reset the singleton (for testing)."""
    global _metadata_provider
    _metadata_provider = None
