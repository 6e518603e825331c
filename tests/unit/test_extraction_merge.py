from onboarding.extraction.merge import apply_extraction
from onboarding.extraction.models import ExtractionResult
from onboarding.forms.models import PersonalInfo, ProfessionalInfo


class TestApplyExtraction:
    def test_overwrites_only_present_keys(self) -> None:
        personal = PersonalInfo(full_name="Digitado", nickname="Mari", cpf="111")
        professional = ProfessionalInfo(creci_number="", manager_name="Carlos")
        result = ExtractionResult(
            personal={"full_name": "Maria Souza", "city": "São Paulo/SP"},
            professional={"creci_number": "123456-F"},
        )

        new_personal, new_professional = apply_extraction(result, personal, professional)

        assert new_personal.full_name == "Maria Souza"
        assert new_personal.city == "São Paulo/SP"
        assert new_personal.nickname == "Mari"
        assert new_personal.cpf == "111"
        assert new_professional.creci_number == "123456-F"
        assert new_professional.manager_name == "Carlos"

    def test_empty_result_changes_nothing(self) -> None:
        personal = PersonalInfo(full_name="Maria")
        professional = ProfessionalInfo(email="m@example.com")
        assert apply_extraction(ExtractionResult(), personal, professional) == (personal, professional)
