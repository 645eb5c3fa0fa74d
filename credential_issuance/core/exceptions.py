"""Exceptions raised while building credential interaction descriptors."""


class IssuanceError(Exception):
    """Base exception for credential issuance errors."""

    pass


class UnknownCredentialTypeError(IssuanceError):
    """A credential type name has no entry in the consulted registry.

    Maps to HTTP 400: the request names an invalid type.
    """

    def __init__(self, type_name: str, registry: str = "credential"):
        self.type_name = type_name
        self.registry = registry
        super().__init__(f"Unknown {registry} type: {type_name}")


class InvalidOfferDefinitionError(IssuanceError):
    """A custom offer declaration is structurally invalid.

    Maps to HTTP 400.
    """

    pass


class EncodingError(IssuanceError):
    """A token's serialized form could not be rendered as a QR code.

    Maps to HTTP 500: indicates an internal inconsistency, not caller fault.
    """

    pass


class RegistryLoadError(IssuanceError):
    """A registry source file is missing or malformed."""

    pass


class AgentError(IssuanceError):
    """Issuer agent not available or failed to mint a token."""

    pass
