from datetime import date

from onboarding.config.settings import Settings
from onboarding.forms.models import FormSnapshot
from onboarding.logging.logger import Log
from onboarding.pdf.factory import PdfRasterizerFactory
from onboarding.report.contract import ContractRasterizer
from onboarding.report.document import ReportDocument
from onboarding.report.exceptions import ReportGenerationError
from onboarding.report.images import LogoFetcher
from onboarding.report.layout import resolve_layout
from onboarding.report.models import GeneratedReport, ReportSettings
from onboarding.report.pipeline import ReportContext, ReportStep
from onboarding.report.steps import (
    ContactInfoStep,
    ContractPagesStep,
    CoverAndPersonalInfoStep,
    CoverSignatureStep,
    DocumentPagesStep,
    FinalizeStep,
    LoadLogoStep,
    ProfessionalInfoStep,
)

GENERATION_FAILED_MESSAGE = "Houve um erro ao gerar o PDF."


class ReportAssembler:
    """Runs the report steps in order over one fresh document.

    Pipeline: logo -> cover/personal -> professional -> contact ->
    cover signature -> one page per document -> contract -> render.
    """

    def __init__(self, steps: list[ReportStep]) -> None:
        self._steps = steps

    def close(self) -> None:
        for step in self._steps:
            step.close()

    def assemble(
        self,
        snapshot: FormSnapshot,
        settings: ReportSettings,
        contract_html: str,
        generated_on: date | None = None,
    ) -> GeneratedReport:
        """Build the PDF for a signed form.

        Raises:
            ReportGenerationError: on any failure; no partial document is returned.
        """
        try:
            layout = resolve_layout(settings)
            context = ReportContext(
                snapshot=snapshot,
                settings=settings,
                layout=layout,
                document=ReportDocument(layout.page_width, layout.page_height),
                contract_html=contract_html,
                generated_on=generated_on or date.today(),
            )
            for step in self._steps:
                context = step.run(context)
            if context.report is None:
                raise ValueError("Report steps finished without rendering a document")
        except Exception as exc:
            Log.error(
                f"Error generating PDF: {exc}",
                registration_type=snapshot.registration_type.value,
            )
            raise ReportGenerationError(GENERATION_FAILED_MESSAGE) from exc

        Log.info(
            "Report assembled",
            filename=context.report.filename,
            pages=context.report.page_count,
            contract_pages=context.contract_pages,
        )
        return context.report


def build_assembler(settings: Settings) -> ReportAssembler:
    """Build a ReportAssembler with all required adapters."""
    rasterizer = PdfRasterizerFactory.create(settings)
    return ReportAssembler(
        steps=[
            LoadLogoStep(LogoFetcher(timeout_seconds=settings.logo_fetch_timeout_seconds)),
            CoverAndPersonalInfoStep(),
            ProfessionalInfoStep(),
            ContactInfoStep(),
            CoverSignatureStep(),
            DocumentPagesStep(rasterizer, zoom=settings.pdf_raster_zoom),
            ContractPagesStep(
                ContractRasterizer(rasterizer),
                city=settings.contract_city,
                counterparty=settings.company_name,
                clipping=settings.contract_clipping,
            ),
            FinalizeStep(settings.report_filename_prefix),
        ]
    )
