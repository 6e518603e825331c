from dataclasses import replace

from onboarding.extraction.models import ExtractionResult
from onboarding.forms.models import PersonalInfo, ProfessionalInfo


def apply_extraction(
    result: ExtractionResult,
    personal: PersonalInfo,
    professional: ProfessionalInfo,
) -> tuple[PersonalInfo, ProfessionalInfo]:
    """Overlay extracted values on the current answers.

    Only keys present in the result are replaced; everything else keeps the
    value the user already has.
    """
    return (replace(personal, **result.personal), replace(professional, **result.professional))
