"""Tests for the claims metadata registry."""
import dataclasses
from pathlib import Path

import pytest

from credential_issuance.core.exceptions import RegistryLoadError, UnknownCredentialTypeError
from credential_issuance.credential.metadata import ClaimsMetadata, ClaimsMetadataProvider


def test_known_types_resolve_to_canonical_type(metadata_provider, claims_metadata_source):
    assert len(metadata_provider) == len(claims_metadata_source)
    for type_name, entry in claims_metadata_source.items():
        metadata = metadata_provider.get_by_type(type_name)
        assert metadata.type == entry["type"]
        assert metadata.fields == tuple(entry.get("fields", ()))


def test_proof_of_age(metadata_provider):
    metadata = metadata_provider.get_by_type("ProofOfAge")
    assert metadata == ClaimsMetadata(
        type="ProofOfAgeCredential",
        name="Proof of age",
        fields=("dateOfBirth", "ageOver18"),
    )


@pytest.mark.parametrize("type_name", ["unknown-type", "", "proofofage", "ProofOfAgeCredential"])
def test_unknown_type_raises(metadata_provider, type_name):
    with pytest.raises(UnknownCredentialTypeError) as exc_info:
        metadata_provider.get_by_type(type_name)
    assert exc_info.value.type_name == type_name


def test_find_by_type_returns_none_for_unknown(metadata_provider):
    assert metadata_provider.find_by_type("unknown-type") is None
    assert metadata_provider.find_by_type("ProofOfEmail").type == "ProofOfEmailCredential"


def test_resolve_all_keeps_order(metadata_provider):
    resolved = metadata_provider.resolve_all(["ProofOfName", "ProofOfAge"])
    assert [m.type for m in resolved] == ["ProofOfNameCredential", "ProofOfAgeCredential"]


def test_resolve_all_fails_on_any_unknown(metadata_provider):
    with pytest.raises(UnknownCredentialTypeError) as exc_info:
        metadata_provider.resolve_all(["ProofOfAge", "NotAType", "ProofOfEmail"])
    assert exc_info.value.type_name == "NotAType"
    assert "NotAType" in str(exc_info.value)


def test_types_listing(metadata_provider):
    assert metadata_provider.types == sorted(metadata_provider.types)
    assert "ProofOfAge" in metadata_provider.types
    assert "ProofOfAge" in metadata_provider


def test_metadata_is_immutable(metadata_provider):
    metadata = metadata_provider.get_by_type("ProofOfAge")
    with pytest.raises(dataclasses.FrozenInstanceError):
        metadata.type = "Tampered"
    assert metadata_provider.get_by_type("ProofOfAge").type == "ProofOfAgeCredential"


def test_source_mutation_does_not_leak_into_registry():
    source = {"ProofOfAge": {"type": "ProofOfAgeCredential"}}
    provider = ClaimsMetadataProvider.from_mapping(source)
    source["Injected"] = {"type": "InjectedCredential"}
    assert provider.find_by_type("Injected") is None


class TestLoading:
    def test_entry_missing_type(self):
        with pytest.raises(RegistryLoadError, match="ProofOfAge"):
            ClaimsMetadataProvider.from_mapping({"ProofOfAge": {"name": "Proof of age"}})

    @pytest.mark.parametrize("fields", ["email", ["email", 1], {"email": True}])
    def test_fields_must_be_list_of_strings(self, fields):
        source = {"ProofOfEmail": {"type": "ProofOfEmailCredential", "fields": fields}}
        with pytest.raises(RegistryLoadError, match="fields"):
            ClaimsMetadataProvider.from_mapping(source)

    def test_fields_default_to_empty(self):
        provider = ClaimsMetadataProvider.from_mapping({"ProofOfEmail": {"type": "ProofOfEmailCredential"}})
        assert provider.get_by_type("ProofOfEmail").fields == ()

    def test_entry_not_an_object(self):
        with pytest.raises(RegistryLoadError):
            ClaimsMetadataProvider.from_mapping({"ProofOfAge": "ProofOfAgeCredential"})

    def test_source_not_an_object(self):
        with pytest.raises(RegistryLoadError):
            ClaimsMetadataProvider.from_mapping(["ProofOfAge"])

    def test_missing_file(self, temp_dir: Path):
        with pytest.raises(RegistryLoadError):
            ClaimsMetadataProvider.from_file(temp_dir / "missing.json")

    def test_invalid_json(self, temp_dir: Path):
        path = temp_dir / "claims.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(RegistryLoadError):
            ClaimsMetadataProvider.from_file(path)
