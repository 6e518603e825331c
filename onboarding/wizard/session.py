"""Wizard state for one broker registration.

Steps only move forward through explicit actions (documents -> form ->
contract -> success); ``go_back`` returns to the previous step without
losing answers.
"""

import io
import re
import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Any

from onboarding.database.models import ManagerRecord
from onboarding.extraction.base import BaseExtractor
from onboarding.extraction.exceptions import ExtractionError
from onboarding.extraction.merge import apply_extraction
from onboarding.forms.models import (
    CompanyDocuments,
    CompanyInfo,
    FormSnapshot,
    IndividualDocuments,
    PartnerDocuments,
    PartnerInfo,
    PersonalInfo,
    ProfessionalInfo,
    RegistrationType,
    UploadedDocument,
)
from onboarding.forms.validation import (
    ValidationErrors,
    cpf_feedback,
    mask_cep,
    mask_cnpj,
    mask_cpf,
    mask_phone,
    validate_company_info,
    validate_partners,
    validate_personal_info,
    validate_professional_info,
    validate_upload_size,
)
from onboarding.logging.logger import Log
from onboarding.messaging.handoff import HandoffPlan, plan_handoff
from onboarding.postal.client import PostalCodeClient
from onboarding.report.assembler import ReportAssembler
from onboarding.report.images import decode_data_url, decode_image, to_black_ink
from onboarding.report.models import GeneratedReport, ReportSettings
from onboarding.wizard.exceptions import StepTransitionError

MISSING_DOCUMENTS_MESSAGE = "Por favor, anexe todos os documentos."

_PARTNER_SLOT = re.compile(r"^partners\[(\d+)\]\.(\w+)$")


class WizardStep(str, Enum):
    DOCUMENTS = "documents"
    FORM = "form"
    CONTRACT = "contract"
    SUCCESS = "success"


@dataclass
class ContractConsent:
    has_read: bool = False
    agreed: bool = False
    signature_matches_id: bool = False


@dataclass
class SessionOptions:
    max_upload_size_mb: int = 5
    captcha_delay_seconds: float = 1.5
    messaging_base_url: str = "https://wa.me"
    messaging_text: str = "Olá, finalizei meu cadastro. Segue em anexo a ficha cadastral."


class OnboardingSession:
    def __init__(
        self,
        *,
        assembler: ReportAssembler,
        report_settings: ReportSettings,
        contract_html: str,
        managers: list[ManagerRecord] | None = None,
        extractor: BaseExtractor | None = None,
        postal_client: PostalCodeClient | None = None,
        registration_type: RegistrationType = RegistrationType.INDIVIDUAL,
        options: SessionOptions | None = None,
        sleep: Callable[[float], None] = time.sleep,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._assembler = assembler
        self._report_settings = report_settings
        self._contract_html = contract_html
        self._managers = managers or []
        self._extractor = extractor
        self._postal_client = postal_client
        self._options = options or SessionOptions()
        self._sleep = sleep
        self._today = today

        self.registration_type = registration_type
        self.step = WizardStep.DOCUMENTS
        self.personal = PersonalInfo()
        self.professional = ProfessionalInfo()
        self.documents = IndividualDocuments()
        self.company = CompanyInfo()
        self.partners: list[PartnerInfo] = [PartnerInfo()]
        self.company_documents = CompanyDocuments()
        self.human_verified = False
        self.consent = ContractConsent()
        self.upload_errors: dict[str, str] = {}
        self.form_errors: ValidationErrors = {}
        self.signature: bytes | None = None
        self.report: GeneratedReport | None = None

    @property
    def is_company(self) -> bool:
        return self.registration_type is RegistrationType.COMPANY

    # Documents step

    def attach_document(self, slot: str, document: UploadedDocument | None) -> str | None:
        """Put a file in a slot (``None`` removes it). Returns the size error, if any.

        Slots are field names (``id_front``) or, for company partners,
        ``partners[<index>].<field>``. Removing a file resets the human check.
        """
        self._require_step(WizardStep.DOCUMENTS)
        self.upload_errors.pop(slot, None)
        if document is not None:
            error = validate_upload_size(document, self._options.max_upload_size_mb)
            if error:
                self.upload_errors[slot] = error
                return error
        self._set_slot(slot, document)
        if document is None:
            self.human_verified = False
        return None

    def add_partner(self) -> int:
        self._require_company()
        self.partners.append(PartnerInfo())
        self.company_documents = replace(
            self.company_documents,
            partners=self.company_documents.partners + (PartnerDocuments(),),
        )
        return len(self.partners) - 1

    def remove_partner(self, index: int) -> None:
        """At least one partner always remains."""
        self._require_company()
        if len(self.partners) <= 1:
            return
        del self.partners[index]
        remaining = list(self.company_documents.partners)
        del remaining[index]
        self.company_documents = replace(self.company_documents, partners=tuple(remaining))

    def missing_documents(self) -> list[str]:
        if self.is_company:
            return self.company_documents.missing_required()
        return self.documents.missing_required()

    def verify_human(self) -> bool:
        """Simulated verification; only available once every required file is attached."""
        self._require_step(WizardStep.DOCUMENTS)
        if self.missing_documents():
            return False
        if not self.human_verified:
            self._sleep(self._options.captcha_delay_seconds)
            self.human_verified = True
        return True

    def analyze_documents(self) -> None:
        """Run OCR over the uploads and move to the form, whatever OCR returns."""
        self._require_step(WizardStep.DOCUMENTS)
        if self.missing_documents():
            raise StepTransitionError(MISSING_DOCUMENTS_MESSAGE)
        if not self.human_verified:
            raise StepTransitionError("Human verification is required before analysis")

        if self._extractor is not None and not self.is_company:
            uploads = [upload for upload, _ in self.documents.plan() if upload is not None]
            try:
                result = self._extractor.extract(uploads)
                self.personal, self.professional = apply_extraction(
                    result, self.personal, self.professional
                )
            except ExtractionError as exc:
                Log.error(f"Erro ao analisar documentos: {exc}")
        self.step = WizardStep.FORM

    # Form step

    def update_personal(self, **values: Any) -> PersonalInfo:
        """Apply answers to the personal section.

        A fully typed CPF with wrong check digits sets the inline ``cpf`` error
        right away; any other CPF edit clears it.
        """
        if "cpf" in values:
            values["cpf"] = mask_cpf(values["cpf"])
            feedback = cpf_feedback(values["cpf"])
            if feedback:
                self.form_errors["cpf"] = feedback
            else:
                self.form_errors.pop("cpf", None)
        if "zip_code" in values:
            values["zip_code"] = mask_cep(values["zip_code"])
        self.personal = replace(self.personal, **values)
        return self.personal

    def update_professional(self, **values: Any) -> ProfessionalInfo:
        if "cellphone" in values:
            values["cellphone"] = mask_phone(values["cellphone"])
        if "actuation_zone" in values:
            values["actuation_zone"] = tuple(values["actuation_zone"])
        self.professional = replace(self.professional, **values)
        return self.professional

    def update_company(self, **values: Any) -> CompanyInfo:
        self._require_company()
        if "cnpj" in values:
            values["cnpj"] = mask_cnpj(values["cnpj"])
        if "zip_code" in values:
            values["zip_code"] = mask_cep(values["zip_code"])
        if "phone" in values:
            values["phone"] = mask_phone(values["phone"])
        if "actuation_zone" in values:
            values["actuation_zone"] = tuple(values["actuation_zone"])
        self.company = replace(self.company, **values)
        return self.company

    def update_partner(self, index: int, **values: Any) -> PartnerInfo:
        self._require_company()
        if "zip_code" in values:
            values["zip_code"] = mask_cep(values["zip_code"])
        if "phone" in values:
            values["phone"] = mask_phone(values["phone"])
        self.partners[index] = replace(self.partners[index], **values)
        return self.partners[index]

    def lookup_postal_code(self) -> None:
        """Fill the address from the zip code; failures leave the address as typed."""
        if self._postal_client is None:
            return
        if self.is_company:
            self.company = self._postal_client.autofill(self.company)
        else:
            self.personal = self._postal_client.autofill(self.personal)

    def submit_form(self) -> ValidationErrors:
        """Validate the questionnaire; an empty result means the contract step is open."""
        self._require_step(WizardStep.FORM)
        if self.is_company:
            errors = {
                **validate_company_info(self.company),
                **validate_partners(tuple(self.partners)),
            }
        else:
            errors = {
                **validate_personal_info(self.personal),
                **validate_professional_info(self.professional),
            }
        self.form_errors = errors
        if not errors:
            self.step = WizardStep.CONTRACT
        return errors

    def go_back(self) -> WizardStep:
        previous = {
            WizardStep.FORM: WizardStep.DOCUMENTS,
            WizardStep.CONTRACT: WizardStep.FORM,
        }
        if self.step not in previous:
            raise StepTransitionError(f"Cannot go back from step '{self.step.value}'")
        self.step = previous[self.step]
        return self.step

    # Contract step

    def mark_contract_read(self) -> None:
        self._require_step(WizardStep.CONTRACT)
        self.consent.has_read = True

    def agree(self, agreed: bool) -> None:
        self._require_step(WizardStep.CONTRACT)
        if agreed and not self.consent.has_read:
            raise StepTransitionError("The contract must be read to the end before agreeing")
        self.consent.agreed = agreed
        if not agreed:
            self.consent.signature_matches_id = False

    def confirm_signature_match(self, confirmed: bool) -> None:
        self._require_step(WizardStep.CONTRACT)
        if confirmed and not self.consent.agreed:
            raise StepTransitionError("Agree to the contract before confirming the signature")
        self.consent.signature_matches_id = confirmed

    def sign(self, signature: bytes | str) -> GeneratedReport:
        """Record the drawn signature and build the report.

        Raises:
            StepTransitionError: if consent is incomplete or the signature is empty.
            DocumentRenderError: if the signature is not a readable image.
            ReportGenerationError: if the report cannot be built; the session stays
                on the contract step so the user can retry.
        """
        self._require_step(WizardStep.CONTRACT)
        if not (self.consent.agreed and self.consent.signature_matches_id):
            raise StepTransitionError("Agree to the contract and confirm the signature first")
        raw = decode_data_url(signature)
        if not raw:
            raise StepTransitionError("A drawn signature is required")

        inked = to_black_ink(decode_image(raw))
        png = io.BytesIO()
        inked.save(png, format="PNG")
        self.signature = png.getvalue()

        self.report = self._assembler.assemble(
            self.snapshot(),
            self._report_settings,
            self._contract_html,
            generated_on=self._today(),
        )
        self.step = WizardStep.SUCCESS
        Log.info("Registration signed", filename=self.report.filename)
        return self.report

    def snapshot(self) -> FormSnapshot:
        return FormSnapshot(
            registration_type=self.registration_type,
            personal=self.personal,
            professional=self.professional,
            documents=self.documents,
            company=self.company,
            partners=tuple(self.partners),
            company_documents=self.company_documents,
            signature=self.signature,
        )

    # Success step

    def manager_phone(self) -> str:
        for manager in self._managers:
            if manager.name == self.professional.manager_name:
                return manager.phone
        return ""

    def handoff(self, can_share_files: bool) -> HandoffPlan:
        self._require_step(WizardStep.SUCCESS)
        if self.report is None:
            raise StepTransitionError("O arquivo PDF ainda não foi gerado ou houve um erro.")
        return plan_handoff(
            self.report,
            manager_phone=self.manager_phone(),
            message=self._options.messaging_text,
            base_url=self._options.messaging_base_url,
            can_share_files=can_share_files,
        )

    def close(self) -> None:
        """Close the HTTP clients held by the report assembler and postal lookup."""
        self._assembler.close()
        if self._postal_client is not None:
            self._postal_client.close()

    def _set_slot(self, slot: str, document: UploadedDocument | None) -> None:
        match = _PARTNER_SLOT.match(slot)
        if match is not None:
            self._require_company()
            index, name = int(match.group(1)), match.group(2)
            partners = list(self.company_documents.partners)
            if name not in PartnerDocuments.LABELS or not 0 <= index < len(partners):
                raise KeyError(slot)
            partners[index] = replace(partners[index], **{name: document})
            self.company_documents = replace(self.company_documents, partners=tuple(partners))
            return
        if self.is_company:
            if slot not in CompanyDocuments.LABELS:
                raise KeyError(slot)
            self.company_documents = replace(self.company_documents, **{slot: document})
            return
        if slot not in IndividualDocuments.LABELS:
            raise KeyError(slot)
        self.documents = replace(self.documents, **{slot: document})

    def _require_step(self, step: WizardStep) -> None:
        if self.step is not step:
            raise StepTransitionError(
                f"Action requires step '{step.value}', session is at '{self.step.value}'"
            )

    def _require_company(self) -> None:
        if not self.is_company:
            raise StepTransitionError("Only available for company registrations")
