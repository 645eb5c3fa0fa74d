"""Display-template binding against credential claims.

A display field names its value either by a path of keys into the claims
tree or by literal text. The path wins when it resolves; a path that does
not resolve is not an error, the field falls back to its text and
otherwise stays unset.
"""
from collections.abc import Mapping, Sequence
from typing import Any, Optional

from credential_issuance.credential.offer.models import DisplayField


class _NotFound:
    """Sentinel for a claim path that does not resolve."""

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = _NotFound()


def resolve_path(claims: Any, path: Sequence[str]) -> Any:
    """Walk ``claims`` by successive keys.

    Mappings are walked by key, lists and tuples by an ASCII decimal index
    (signs and other digit characters never match). The
    leaf is returned as-is, whatever its type.

    Returns:
        The leaf value, or NOT_FOUND when a key is missing or an
        intermediate value is not a container.
    """
    node = claims
    for key in path:
        if isinstance(node, Mapping):
            if key not in node:
                return NOT_FOUND
            node = node[key]
        elif isinstance(node, (list, tuple)):
            if not (key.isascii() and key.isdigit()):
                return NOT_FOUND
            index = int(key)
            if index >= len(node):
                return NOT_FOUND
            node = node[index]
        else:
            return NOT_FOUND
    return node


def resolve_field(
    claims: Mapping[str, Any],
    path: Optional[Sequence[str]] = None,
    text: Optional[str] = None,
    label: Optional[str] = None,
) -> DisplayField:
    """Bind one display field to ``claims``.

    Label is carried through untouched and never used as a fallback.
    """
    value: Any = NOT_FOUND
    if path:
        value = resolve_path(claims, path)
    if value is NOT_FOUND and text is not None:
        value = text
    if value is NOT_FOUND:
        value = None

    return DisplayField(
        path=tuple(path) if path is not None else None,
        text=text,
        label=label,
        value=value,
    )
