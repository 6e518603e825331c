from dataclasses import dataclass, field

# Questionnaire fields the OCR provider is asked to fill.
PERSONAL_FIELDS: tuple[str, ...] = (
    "full_name",
    "birth_date",
    "gender",
    "marital_status",
    "nationality",
    "rg",
    "cpf",
    "zip_code",
    "address",
    "number",
    "complement",
    "neighborhood",
    "city",
)
PROFESSIONAL_FIELDS: tuple[str, ...] = ("creci_number",)


@dataclass(frozen=True)
class DocumentImage:
    """One image sent to the provider, as an inline data URL."""

    source_name: str
    data_url: str


@dataclass(frozen=True)
class ExtractionResult:
    """Values read from the documents. Fields the provider left out are absent."""

    personal: dict[str, str] = field(default_factory=dict)
    professional: dict[str, str] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.personal and not self.professional
