"""Registration manifest consumed by the command-line entry point.

A manifest is a JSON file describing one broker's answers, the files they
uploaded and their signature image. File paths are resolved relative to the
manifest's own directory.
"""

import json
from collections.abc import Iterable
from dataclasses import fields
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator

from onboarding.forms.models import (
    CompanyDocuments,
    CompanyInfo,
    IndividualDocuments,
    PartnerDocuments,
    PartnerInfo,
    PersonalInfo,
    ProfessionalInfo,
    RegistrationType,
    UploadedDocument,
)


class ManifestError(Exception):
    """Raised when a manifest cannot be read or does not match the expected shape."""


class PartnerManifest(BaseModel):
    info: dict[str, Any] = Field(default_factory=dict)
    documents: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _known_keys(self) -> "PartnerManifest":
        _check_keys("partner info", self.info, _field_names(PartnerInfo))
        _check_keys("partner documents", self.documents, PartnerDocuments.LABELS)
        return self


class RegistrationManifest(BaseModel):
    registration_type: RegistrationType = RegistrationType.INDIVIDUAL
    documents: dict[str, str] = Field(default_factory=dict)
    personal: dict[str, Any] = Field(default_factory=dict)
    professional: dict[str, Any] = Field(default_factory=dict)
    company: dict[str, Any] = Field(default_factory=dict)
    partners: list[PartnerManifest] = Field(default_factory=list)
    signature: str
    analyze_documents: bool = False
    lookup_postal_code: bool = False
    can_share_files: bool = False

    @model_validator(mode="after")
    def _known_keys(self) -> "RegistrationManifest":
        _check_keys("personal", self.personal, _field_names(PersonalInfo))
        _check_keys("professional", self.professional, _field_names(ProfessionalInfo))
        _check_keys("company", self.company, _field_names(CompanyInfo))
        slots = (
            CompanyDocuments.LABELS
            if self.registration_type is RegistrationType.COMPANY
            else IndividualDocuments.LABELS
        )
        _check_keys("documents", self.documents, slots)
        return self

    @property
    def uploads(self) -> list[tuple[str, str]]:
        """(slot, relative path) pairs in attach order, partner slots prefixed."""
        slots = list(self.documents.items())
        for index, partner in enumerate(self.partners):
            slots.extend((f"partners[{index}].{slot}", path) for slot, path in partner.documents.items())
        return slots


def _field_names(section: type) -> set[str]:
    return {f.name for f in fields(section)}


def _check_keys(block: str, values: dict[str, Any], allowed: Iterable[str]) -> None:
    unknown = sorted(set(values) - set(allowed))
    if unknown:
        raise ValueError(f"unknown {block} keys: {', '.join(unknown)}")


def load_manifest(path: Path) -> RegistrationManifest:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ManifestError(f"Cannot read manifest {path}: {exc}") from exc
    try:
        return RegistrationManifest.model_validate(raw)
    except ValidationError as exc:
        raise ManifestError(f"Invalid manifest {path}: {exc}") from exc


def load_upload(base_dir: Path, relative: str) -> UploadedDocument:
    file_path = (base_dir / relative).resolve()
    try:
        return UploadedDocument.from_path(file_path)
    except OSError as exc:
        raise ManifestError(f"Cannot read uploaded file {file_path}: {exc}") from exc


def load_signature(base_dir: Path, relative: str) -> bytes:
    file_path = (base_dir / relative).resolve()
    try:
        return file_path.read_bytes()
    except OSError as exc:
        raise ManifestError(f"Cannot read signature {file_path}: {exc}") from exc
