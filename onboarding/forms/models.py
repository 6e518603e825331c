import mimetypes
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import ClassVar

DocumentSlot = tuple["UploadedDocument | None", str]


class RegistrationType(str, Enum):
    INDIVIDUAL = "PF"
    COMPANY = "PJ"

    @property
    def description(self) -> str:
        return "Pessoa Física" if self is RegistrationType.INDIVIDUAL else "Pessoa Jurídica"


@dataclass(frozen=True)
class UploadedDocument:
    """An uploaded file as the browser describes it."""

    content: bytes = field(repr=False)
    name: str
    size_bytes: int
    last_modified: int
    mime_type: str

    @property
    def identity(self) -> tuple[str, int, int]:
        """Deduplication key: (name, size, last-modified ms).

        This is a metadata heuristic, not a content hash: two different files
        that share all three values count as the same upload.
        """
        return (self.name, self.size_bytes, self.last_modified)

    @property
    def is_image(self) -> bool:
        return "image" in self.mime_type

    @property
    def is_pdf(self) -> bool:
        return self.mime_type == "application/pdf"

    @classmethod
    def from_path(cls, path: Path, mime_type: str | None = None) -> "UploadedDocument":
        stat = path.stat()
        guessed, _ = mimetypes.guess_type(path.name)
        return cls(
            content=path.read_bytes(),
            name=path.name,
            size_bytes=stat.st_size,
            last_modified=int(stat.st_mtime * 1000),
            mime_type=mime_type or guessed or "application/octet-stream",
        )


@dataclass(frozen=True)
class PersonalInfo:
    full_name: str = ""
    nickname: str = ""
    birth_date: str = ""
    gender: str = ""
    marital_status: str = ""
    nationality: str = ""
    rg: str = ""
    cpf: str = ""
    zip_code: str = ""
    address: str = ""
    number: str = ""
    complement: str = ""
    neighborhood: str = ""
    city: str = ""


@dataclass(frozen=True)
class ProfessionalInfo:
    creci_number: str = ""
    manager_name: str = ""
    work_mode: str = ""
    actuation_zone: tuple[str, ...] = ()
    experience_time: str = ""
    has_other_income: str = ""
    cellphone: str = ""
    email: str = ""
    uses_social_media: str = ""
    instagram: str = ""


@dataclass(frozen=True)
class IndividualDocuments:
    id_front: UploadedDocument | None = None
    id_back: UploadedDocument | None = None
    creci_front: UploadedDocument | None = None
    creci_back: UploadedDocument | None = None
    residence: UploadedDocument | None = None

    LABELS: ClassVar[dict[str, str]] = {
        "id_front": "01. CNH ou RG - Frente",
        "id_back": "02. CNH ou RG - Verso",
        "creci_front": "03. CRECI - Frente",
        "creci_back": "04. CRECI - Verso",
        "residence": "05. Comprovante de Residência",
    }

    def plan(self) -> list[DocumentSlot]:
        return [(getattr(self, slot), label) for slot, label in self.LABELS.items()]

    def missing_required(self) -> list[str]:
        return [slot for slot in self.LABELS if getattr(self, slot) is None]


@dataclass(frozen=True)
class CompanyInfo:
    business_name: str = ""
    trade_name: str = ""
    cnpj: str = ""
    creci: str = ""
    zip_code: str = ""
    address: str = ""
    number: str = ""
    complement: str = ""
    neighborhood: str = ""
    city: str = ""
    phone: str = ""
    email: str = ""
    actuation_zone: tuple[str, ...] = ()


@dataclass(frozen=True)
class PartnerInfo:
    name: str = ""
    birth_date: str = ""
    gender: str = ""
    nationality: str = ""
    marital_status: str = ""
    education_level: str = ""
    rg: str = ""
    zip_code: str = ""
    address: str = ""
    number: str = ""
    complement: str = ""
    neighborhood: str = ""
    city: str = ""
    phone: str = ""
    email: str = ""


@dataclass(frozen=True)
class PartnerDocuments:
    id_front: UploadedDocument | None = None
    id_back: UploadedDocument | None = None
    creci_front: UploadedDocument | None = None
    creci_back: UploadedDocument | None = None
    residence: UploadedDocument | None = None
    creci_certificate: UploadedDocument | None = None

    LABELS: ClassVar[dict[str, str]] = {
        "id_front": "05. CNH ou RG (Sócio) - Frente",
        "id_back": "06. CNH ou RG (Sócio) - Verso",
        "creci_front": "07. CRECI - Frente",
        "creci_back": "08. CRECI - Verso",
        "residence": "09. Comprovante de Endereço (PF)",
        "creci_certificate": "10. Certidão de Regularidade do Creci - (PJ)",
    }
    # Partners after the first only have to send their ID.
    ALWAYS_REQUIRED: ClassVar[tuple[str, ...]] = ("id_front", "id_back")


@dataclass(frozen=True)
class CompanyDocuments:
    social_contract: UploadedDocument | None = None
    cnpj_card: UploadedDocument | None = None
    address_proof: UploadedDocument | None = None
    creci_certificate: UploadedDocument | None = None
    partners: tuple[PartnerDocuments, ...] = field(default_factory=lambda: (PartnerDocuments(),))

    LABELS: ClassVar[dict[str, str]] = {
        "social_contract": "01. Contrato Social / Última Alteração",
        "cnpj_card": "02. Cartão CNPJ",
        "address_proof": "03. Comprovante de Endereço (PJ)",
        "creci_certificate": "04. Certidão de Regularidade do Creci - (PJ)",
    }

    def plan(self) -> list[DocumentSlot]:
        slots: list[DocumentSlot] = [
            (getattr(self, slot), label) for slot, label in self.LABELS.items()
        ]
        for index, partner in enumerate(self.partners, start=1):
            for slot, label in PartnerDocuments.LABELS.items():
                slots.append((getattr(partner, slot), f"Sócio {index}: {label}"))
        return slots

    def missing_required(self) -> list[str]:
        missing = [slot for slot in self.LABELS if getattr(self, slot) is None]
        for index, partner in enumerate(self.partners):
            required = (
                PartnerDocuments.LABELS if index == 0 else PartnerDocuments.ALWAYS_REQUIRED
            )
            missing.extend(
                f"partners[{index}].{slot}"
                for slot in required
                if getattr(partner, slot) is None
            )
        return missing


@dataclass(frozen=True)
class FormSnapshot:
    """Everything the report needs, frozen at the moment the contract is signed."""

    registration_type: RegistrationType = RegistrationType.INDIVIDUAL
    personal: PersonalInfo = field(default_factory=PersonalInfo)
    professional: ProfessionalInfo = field(default_factory=ProfessionalInfo)
    documents: IndividualDocuments = field(default_factory=IndividualDocuments)
    company: CompanyInfo = field(default_factory=CompanyInfo)
    partners: tuple[PartnerInfo, ...] = ()
    company_documents: CompanyDocuments = field(default_factory=CompanyDocuments)
    signature: bytes | None = field(default=None, repr=False)

    @property
    def is_company(self) -> bool:
        return self.registration_type is RegistrationType.COMPANY

    def document_plan(self) -> list[DocumentSlot]:
        """Upload slots in the order their pages appear in the report."""
        if self.is_company:
            return self.company_documents.plan()
        return self.documents.plan()

    @property
    def signer_name(self) -> str:
        if self.is_company:
            if self.partners and self.partners[0].name:
                return self.partners[0].name
            return self.company.business_name
        return self.personal.full_name

    @property
    def signer_document(self) -> str:
        return self.company.cnpj if self.is_company else self.personal.cpf

    @property
    def signer_role(self) -> str:
        return "Sócio Administrador" if self.is_company else "Corretor"
