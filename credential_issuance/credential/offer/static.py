"""Static credential offer catalog.

Pre-defined offer templates keyed by credential type name. Templates use
the same declaration format as custom offers and are built through the
CredentialOfferFactory once, at load time.
"""
import copy
import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any, Optional

from credential_issuance import config
from credential_issuance.core.exceptions import (
    InvalidOfferDefinitionError,
    RegistryLoadError,
    UnknownCredentialTypeError,
)
from credential_issuance.credential.offer.factory import (
    CredentialOfferFactory,
    get_credential_offer_factory,
)
from credential_issuance.credential.offer.models import CredentialOfferRequest

log = logging.getLogger(__name__)

REGISTRY_NAME = "credential offer"


class StaticCredentialOfferProvider:
    """Immutable catalog of offer templates.

    Lookups hand out deep copies; the catalog's own templates are never
    exposed.
    """

    def __init__(self, templates: Mapping[str, CredentialOfferRequest]):
        self._templates = MappingProxyType(dict(templates))

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any],
        factory: Optional[CredentialOfferFactory] = None,
    ) -> "StaticCredentialOfferProvider":
        """Build the catalog from decoded JSON.

        Raises:
            RegistryLoadError: A template is not a valid offer declaration.
        """
        if not isinstance(data, Mapping):
            raise RegistryLoadError("Credential offer source must be an object")

        factory = factory or get_credential_offer_factory()
        templates = {}
        for type_name, declaration in data.items():
            try:
                templates[type_name] = factory.create(declaration)
            except InvalidOfferDefinitionError as e:
                raise RegistryLoadError(f"Invalid offer template {type_name}: {e}") from e
        return cls(templates)

    @classmethod
    def from_file(cls, path: Path) -> "StaticCredentialOfferProvider":
        """Load the catalog from a JSON file."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise RegistryLoadError(f"Cannot load credential offers from {path}: {e}") from e

        provider = cls.from_mapping(data)
        log.info(f"Loaded {len(provider)} static credential offers from {path}")
        return provider

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._templates

    @property
    def types(self) -> list[str]:
        """Catalog type names, sorted."""
        return sorted(self._templates)

    def find_by_type(self, type_name: str) -> Optional[CredentialOfferRequest]:
        """Copy of the template, or None for unknown types."""
        template = self._templates.get(type_name)
        if template is None:
            return None
        return copy.deepcopy(template)

    def get_by_type(self, type_name: str) -> CredentialOfferRequest:
        """Copy of the template.

        Raises:
            UnknownCredentialTypeError: Type is not in the catalog.
        """
        offer = self.find_by_type(type_name)
        if offer is None:
            raise UnknownCredentialTypeError(type_name, REGISTRY_NAME)
        return offer

    def resolve_all(self, type_names: Iterable[str]) -> list[CredentialOfferRequest]:
        """Copy a batch of templates; any unknown type fails the whole batch."""
        type_names = list(type_names)
        for type_name in type_names:
            if type_name not in self._templates:
                raise UnknownCredentialTypeError(type_name, REGISTRY_NAME)
        return [copy.deepcopy(self._templates[type_name]) for type_name in type_names]


# Module-level singleton
_offer_provider: Optional[StaticCredentialOfferProvider] = None


def get_static_offer_provider() -> StaticCredentialOfferProvider:
    """Get or load the static offer catalog singleton."""
    global _offer_provider
    if _offer_provider is None:
        _offer_provider = StaticCredentialOfferProvider.from_file(config.STATIC_OFFERS_FILE)
    return _offer_provider


def reset_static_offer_provider() -> None:
    """Reset the singleton (for testing)."""
    global _offer_provider
    _offer_provider = None
