from dataclasses import dataclass
from urllib.parse import quote

from onboarding.forms.validation import only_digits
from onboarding.report.models import GeneratedReport

COUNTRY_CODE = "55"
# Unreserved marks left unescaped in the prefilled text.
_URI_COMPONENT_SAFE = "!*'()"
SHARE_TITLE = "Ficha Cadastral"
MANUAL_ATTACH_INSTRUCTIONS = (
    "Como você está num dispositivo que não suporta o envio direto de arquivos "
    "(Desktop), o PDF foi baixado automaticamente.\n\n"
    "Por favor, anexe-o na conversa do WhatsApp que será aberta a seguir."
)


@dataclass(frozen=True)
class HandoffPlan:
    """How the finished report reaches the manager.

    ``attach`` True means the platform shares the file directly; otherwise the
    caller saves ``report`` locally, shows ``instructions`` and opens ``link``.
    """

    link: str
    message: str
    report: GeneratedReport
    attach: bool
    instructions: str = ""
    title: str = SHARE_TITLE


def normalize_phone(phone: str) -> str:
    """Digits only; 10-11 digit national numbers get the Brazilian country code."""
    digits = only_digits(phone or "")
    if 10 <= len(digits) <= 11:
        return f"{COUNTRY_CODE}{digits}"
    return digits


def build_chat_link(base_url: str, phone: str, message: str) -> str:
    """An empty phone yields a link that opens the app's contact picker."""
    return f"{base_url.rstrip('/')}/{normalize_phone(phone)}?text={quote(message, safe=_URI_COMPONENT_SAFE)}"


def plan_handoff(
    report: GeneratedReport,
    manager_phone: str,
    message: str,
    base_url: str,
    can_share_files: bool,
) -> HandoffPlan:
    link = build_chat_link(base_url, manager_phone, message)
    if can_share_files:
        return HandoffPlan(link=link, message=message, report=report, attach=True)
    return HandoffPlan(
        link=link,
        message=message,
        report=report,
        attach=False,
        instructions=MANUAL_ATTACH_INSTRUCTIONS,
    )
