"""Field masks and validation rules for the registration questionnaire.

Validators return a mapping of field name -> user-facing message; an empty
mapping means the section is complete.
"""

import re
from dataclasses import fields

from onboarding.forms.models import (
    CompanyInfo,
    PartnerInfo,
    PersonalInfo,
    ProfessionalInfo,
    UploadedDocument,
)

ValidationErrors = dict[str, str]

REQUIRED_MESSAGE = "Campo obrigatório"
INVALID_CPF_MESSAGE = "CPF Inválido"

_NON_DIGITS = re.compile(r"\D")
_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")

_OPTIONAL_PERSONAL = frozenset({"complement"})
_OPTIONAL_PROFESSIONAL = frozenset({"instagram"})
_OPTIONAL_COMPANY = frozenset({"complement"})
_OPTIONAL_PARTNER = frozenset({"complement"})


def only_digits(value: str) -> str:
    return _NON_DIGITS.sub("", value)


def validate_cpf(cpf: str) -> bool:
    """Check a CPF's two mod-11 check digits.

    Punctuation is ignored. Eleven repeated digits are rejected even though
    their check digits add up.
    """
    digits = only_digits(cpf)
    if len(digits) != 11 or digits == digits[0] * 11:
        return False
    numbers = [int(d) for d in digits]
    for position in (9, 10):
        total = sum(n * (position + 1 - i) for i, n in enumerate(numbers[:position]))
        check = (total * 10) % 11
        if check == 10:
            check = 0
        if check != numbers[position]:
            return False
    return True


def mask_cpf(value: str) -> str:
    """Format as ``000.000.000-00`` while typing."""
    masked = only_digits(value)
    masked = re.sub(r"(\d{3})(\d)", r"\1.\2", masked, count=1)
    masked = re.sub(r"(\d{3})(\d)", r"\1.\2", masked, count=1)
    masked = re.sub(r"(\d{3})(\d{1,2})", r"\1-\2", masked, count=1)
    return re.sub(r"(-\d{2})\d+?$", r"\1", masked, count=1)


def mask_cep(value: str) -> str:
    return re.sub(r"^(\d{5})(\d)", r"\1-\2", only_digits(value))[:9]


def mask_phone(value: str) -> str:
    masked = re.sub(r"^(\d{2})(\d)", r"(\1) \2", only_digits(value))
    masked = re.sub(r"(\d)(\d{4})$", r"\1-\2", masked)
    return masked[:15]


def mask_cnpj(value: str) -> str:
    masked = re.sub(r"^(\d{2})(\d)", r"\1.\2", only_digits(value))
    masked = re.sub(r"^(\d{2})\.(\d{3})(\d)", r"\1.\2.\3", masked)
    masked = re.sub(r"\.(\d{3})(\d)", r".\1/\2", masked, count=1)
    masked = re.sub(r"(\d{4})(\d)", r"\1-\2", masked, count=1)
    return masked[:18]


def format_birth_date(value: str) -> str:
    """``YYYY-MM-DD`` -> ``DD/MM/YYYY``; other shapes are returned unchanged."""
    match = _ISO_DATE.match(value)
    if match is None:
        return value
    year, month, day = match.groups()
    return f"{day}/{month}/{year}"


def validate_upload_size(document: UploadedDocument, max_size_mb: int) -> str | None:
    if document.size_bytes > max_size_mb * 1024 * 1024:
        return f'O arquivo "{document.name}" excede o limite de {max_size_mb}MB.'
    return None


def validate_personal_info(personal: PersonalInfo) -> ValidationErrors:
    errors = _missing_fields(personal, _OPTIONAL_PERSONAL)
    if "cpf" not in errors and not validate_cpf(personal.cpf):
        errors["cpf"] = INVALID_CPF_MESSAGE
    return errors


def validate_professional_info(professional: ProfessionalInfo) -> ValidationErrors:
    return _missing_fields(professional, _OPTIONAL_PROFESSIONAL)


def validate_company_info(company: CompanyInfo) -> ValidationErrors:
    return _missing_fields(company, _OPTIONAL_COMPANY)


def validate_partners(partners: tuple[PartnerInfo, ...]) -> ValidationErrors:
    if not partners:
        return {"partners": REQUIRED_MESSAGE}
    errors: ValidationErrors = {}
    for index, partner in enumerate(partners):
        for name, message in _missing_fields(partner, _OPTIONAL_PARTNER).items():
            errors[f"partners[{index}].{name}"] = message
    return errors


def cpf_feedback(cpf: str) -> str | None:
    """Inline hint for the CPF input: only a fully typed, wrong CPF is flagged."""
    if len(cpf) == 14 and not validate_cpf(cpf):
        return INVALID_CPF_MESSAGE
    return None


def _missing_fields(section: object, optional: frozenset[str]) -> ValidationErrors:
    errors: ValidationErrors = {}
    for f in fields(section):  # type: ignore[arg-type]
        if f.name in optional:
            continue
        value = getattr(section, f.name)
        empty = not value if isinstance(value, tuple) else not str(value).strip()
        if empty:
            errors[f.name] = REQUIRED_MESSAGE
    return errors
