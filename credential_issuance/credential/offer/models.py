"""Canonical credential offer model.

Every offer flow (catalog or custom) converges on CredentialOfferRequest
before a token is minted.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class RenderAs(str, Enum):
    """How the wallet renders an offered credential."""

    DOCUMENT = "document"
    PERMISSION = "permission"
    CLAIM = "claim"


@dataclass
class DisplayField:
    """One display slot, resolved from a claim path or literal text."""

    path: Optional[tuple[str, ...]] = None
    text: Optional[str] = None
    label: Optional[str] = None
    value: Any = None  # None when neither path nor text resolved

    @property
    def is_set(self) -> bool:
        return self.value is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.path is not None:
            data["path"] = list(self.path)
        if self.text is not None:
            data["text"] = self.text
        if self.label is not None:
            data["label"] = self.label
        if self.value is not None:
            data["value"] = self.value
        return data


@dataclass
class DisplayTemplate:
    """Title, subtitle, description and property rows of an offer."""

    title: Optional[DisplayField] = None
    subtitle: Optional[DisplayField] = None
    description: Optional[DisplayField] = None
    properties: list[DisplayField] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for slot in ("title", "subtitle", "description"):
            display_field = getattr(self, slot)
            if display_field is not None:
                data[slot] = display_field.to_dict()
        data["properties"] = [prop.to_dict() for prop in self.properties]
        return data


@dataclass
class CredentialOfferRequest:
    """A credential the issuer is willing to grant."""

    type: str
    render_as: RenderAs
    schema: Optional[str] = None
    name: Optional[str] = None
    claims: dict[str, Any] = field(default_factory=dict)
    display: DisplayTemplate = field(default_factory=DisplayTemplate)

    def to_dict(self) -> dict[str, Any]:
        """Wire form embedded in credential offer tokens."""
        data: dict[str, Any] = {"type": self.type}
        if self.name is not None:
            data["name"] = self.name
        if self.schema is not None:
            data["schema"] = self.schema
        data["claims"] = dict(self.claims)
        data["renderAs"] = self.render_as.value
        data["display"] = self.display.to_dict()
        return data
