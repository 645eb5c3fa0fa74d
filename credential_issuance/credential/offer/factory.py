"""Custom credential offer construction.

Turns a raw offer declaration, as posted by a client or listed in the
static offer catalog, into a CredentialOfferRequest with its display
template bound to the declared claims.
"""
import logging
from collections.abc import Mapping
from typing import Any, Optional

from credential_issuance.core.exceptions import InvalidOfferDefinitionError
from credential_issuance.credential.offer.display import resolve_field
from credential_issuance.credential.offer.models import (
    CredentialOfferRequest,
    DisplayField,
    DisplayTemplate,
    RenderAs,
)

log = logging.getLogger(__name__)

DISPLAY_SLOTS = ("title", "subtitle", "description")


class CredentialOfferFactory:
    """Builds canonical offers from raw declarations.

    Declarations use the wire keys: ``name``, ``type``, ``schema``,
    ``claims``, ``renderAs`` and ``display``. Each display field carries
    any of ``path`` (list of claim keys), ``text`` and ``label``.
    """

    def create(self, raw_offer: Mapping[str, Any]) -> CredentialOfferRequest:
        """Create an offer from a raw declaration.

        Raises:
            InvalidOfferDefinitionError: Declaration is structurally invalid.
        """
        if not isinstance(raw_offer, Mapping):
            raise InvalidOfferDefinitionError("Offer declaration must be an object")

        credential_type = self._require_string(raw_offer, "type")
        schema = self._require_string(raw_offer, "schema")
        render_as = self._parse_render_as(raw_offer.get("renderAs"))

        name = raw_offer.get("name")
        if name is not None and not isinstance(name, str):
            raise InvalidOfferDefinitionError("Offer 'name' must be a string")

        claims = raw_offer.get("claims")
        if claims is None:
            claims = {}
        if not isinstance(claims, Mapping):
            raise InvalidOfferDefinitionError("Offer 'claims' must be an object")
        claims = dict(claims)

        display = self._bind_display(raw_offer.get("display"), claims)

        log.debug(
            f"Built offer type={credential_type} render_as={render_as.value} "
            f"properties={len(display.properties)}"
        )

        return CredentialOfferRequest(
            type=credential_type,
            render_as=render_as,
            schema=schema,
            name=name,
            claims=claims,
            display=display,
        )

    @staticmethod
    def _require_string(raw_offer: Mapping[str, Any], key: str) -> str:
        value = raw_offer.get(key)
        if not isinstance(value, str) or not value:
            raise InvalidOfferDefinitionError(f"Offer '{key}' is required")
        return value

    @staticmethod
    def _parse_render_as(value: Any) -> RenderAs:
        try:
            return RenderAs(value)
        except ValueError:
            allowed = ", ".join(r.value for r in RenderAs)
            raise InvalidOfferDefinitionError(
                f"Invalid renderAs: {value!r}. Expected one of: {allowed}"
            ) from None

    def _bind_display(self, raw_display: Any, claims: dict[str, Any]) -> DisplayTemplate:
        if raw_display is None:
            return DisplayTemplate()
        if not isinstance(raw_display, Mapping):
            raise InvalidOfferDefinitionError("Offer 'display' must be an object")

        slots: dict[str, Optional[DisplayField]] = {}
        for slot in DISPLAY_SLOTS:
            raw_field = raw_display.get(slot)
            slots[slot] = (
                None if raw_field is None else self._bind_field(raw_field, claims, slot)
            )

        raw_properties = raw_display.get("properties")
        if raw_properties is None:
            raw_properties = []
        if not isinstance(raw_properties, list):
            raise InvalidOfferDefinitionError("Display 'properties' must be a list")

        properties = [
            self._bind_field(raw_field, claims, f"properties[{i}]")
            for i, raw_field in enumerate(raw_properties)
        ]

        return DisplayTemplate(properties=properties, **slots)

    @staticmethod
    def _bind_field(raw_field: Any, claims: dict[str, Any], where: str) -> DisplayField:
        if not isinstance(raw_field, Mapping):
            raise InvalidOfferDefinitionError(f"Display field {where} must be an object")

        path = raw_field.get("path")
        if path is not None and (
            not isinstance(path, list) or not all(isinstance(key, str) for key in path)
        ):
            raise InvalidOfferDefinitionError(
                f"Display field {where}: 'path' must be a list of strings"
            )

        text = raw_field.get("text")
        label = raw_field.get("label")
        for key, value in (("text", text), ("label", label)):
            if value is not None and not isinstance(value, str):
                raise InvalidOfferDefinitionError(
                    f"Display field {where}: '{key}' must be a string"
                )

        return resolve_field(claims, path=path, text=text, label=label)


# Module-level singleton
_offer_factory: Optional[CredentialOfferFactory] = None


def get_credential_offer_factory() -> CredentialOfferFactory:
    """Get or create the offer factory singleton."""
    global _offer_factory
    if _offer_factory is None:
        _offer_factory = CredentialOfferFactory()
    return _offer_factory
