from onboarding.forms.models import CompanyInfo, PersonalInfo
from onboarding.forms.validation import format_birth_date
from onboarding.logging.logger import Log
from onboarding.pdf.base import BasePdfRasterizer
from onboarding.report.compositors import DocumentCompositor, SignatureCompositor
from onboarding.report.contract import ContractPainter, ContractRasterizer, SignatureBlock
from onboarding.report.exceptions import DocumentRenderError
from onboarding.report.images import LogoFetcher, decode_image
from onboarding.report.models import GeneratedReport
from onboarding.report.naming import build_report_filename
from onboarding.report.painters import FieldRenderer, PageDecorator
from onboarding.report.pipeline import ReportContext, ReportStep


class LoadLogoStep(ReportStep):
    def __init__(self, logo_fetcher: LogoFetcher) -> None:
        self._logo_fetcher = logo_fetcher

    def run(self, context: ReportContext) -> ReportContext:
        context.logo = self._logo_fetcher.fetch(context.settings.logo_url)
        context.decorator = PageDecorator(context.document, context.layout, context.logo)
        context.fields = FieldRenderer(
            context.document, context.layout, context.decorator, context.cursor
        )
        return context

    def close(self) -> None:
        self._logo_fetcher.close()


class CoverAndPersonalInfoStep(ReportStep):
    def run(self, context: ReportContext) -> ReportContext:
        decorator = context.require_decorator()
        fields = context.require_fields()
        snapshot = context.snapshot

        decorator.draw_header()
        decorator.draw_footer(1)
        context.cursor.page_number = 1
        context.cursor.y = context.layout.body_top

        fields.add_line(
            f"Gerado em: {context.generated_on.strftime('%d/%m/%Y')}", advance=6, align="right"
        )
        fields.add_line(
            f"Tipo de Cadastro: {snapshot.registration_type.description}", advance=8, style="bold"
        )

        if snapshot.is_company:
            company = snapshot.company
            fields.add_section_title("1. Dados da Empresa")
            fields.add_field("Razão Social", company.business_name)
            fields.add_field("Nome Fantasia", company.trade_name)
            fields.add_field("CNPJ", company.cnpj)
            fields.add_field("CRECI", company.creci)
            fields.add_field("Gerente", snapshot.professional.manager_name)
            _add_address(fields, company)
        else:
            personal = snapshot.personal
            fields.add_section_title("1. Informações Pessoais")
            fields.add_field("Nome Completo", personal.full_name)
            fields.add_field("Apelido", personal.nickname)
            fields.add_field("Data de Nascimento", format_birth_date(personal.birth_date))
            fields.add_field("Sexo", personal.gender)
            fields.add_field("Estado Civil", personal.marital_status)
            fields.add_field("Nacionalidade", personal.nationality)
            fields.add_field("RG", personal.rg)
            fields.add_field("CPF", personal.cpf)
            _add_address(fields, personal)
        return context


class ProfessionalInfoStep(ReportStep):
    def run(self, context: ReportContext) -> ReportContext:
        fields = context.require_fields()
        snapshot = context.snapshot

        if snapshot.is_company:
            fields.add_section_title("2. Quadro Societário")
            for number, partner in enumerate(snapshot.partners, start=1):
                fields.ensure_space(FieldRenderer.SECTION_BREAK_THRESHOLD)
                fields.add_line(f"Sócio {number}", advance=6, style="bold")
                fields.add_field("Nome Completo", partner.name)
                fields.add_field("Data de Nascimento", format_birth_date(partner.birth_date))
                fields.add_field("Sexo", partner.gender)
                fields.add_field("Nacionalidade", partner.nationality)
                fields.add_field("Estado Civil", partner.marital_status)
                fields.add_field("Grau de Instrução", partner.education_level)
                fields.add_field("RG", partner.rg)
                fields.add_field(
                    "Endereço",
                    ", ".join(
                        part
                        for part in (
                            partner.address,
                            partner.number,
                            partner.complement,
                            partner.neighborhood,
                            partner.city,
                            partner.zip_code,
                        )
                        if part
                    ),
                )
                fields.add_field("Telefone/Celular", partner.phone)
                fields.add_field("E-mail", partner.email)
            return context

        professional = snapshot.professional
        fields.add_section_title("2. Informações Profissionais")
        fields.add_field("CRECI", professional.creci_number)
        fields.add_field("Gerente", professional.manager_name)
        fields.add_field("Modo de Atuação", professional.work_mode)
        fields.add_field("Zonas de Atuação", ", ".join(professional.actuation_zone))
        fields.add_field("Tempo de Experiência", professional.experience_time)
        fields.add_field("Possui Outra Renda", professional.has_other_income)
        return context


class ContactInfoStep(ReportStep):
    def run(self, context: ReportContext) -> ReportContext:
        fields = context.require_fields()
        snapshot = context.snapshot

        if snapshot.is_company:
            company = snapshot.company
            fields.add_section_title("3. Contato")
            fields.add_field("Telefone/Celular", company.phone)
            fields.add_field("E-mail", company.email)
            fields.add_field("Região de Atuação", ", ".join(company.actuation_zone))
            return context

        professional = snapshot.professional
        fields.add_section_title("3. Contato e Social")
        fields.add_field("Celular", professional.cellphone)
        fields.add_field("E-mail", professional.email)
        fields.add_field("Usa Redes Sociais?", professional.uses_social_media)
        fields.add_field("Instagram", professional.instagram)
        return context


class CoverSignatureStep(ReportStep):
    def run(self, context: ReportContext) -> ReportContext:
        if context.snapshot.signature is None:
            return context
        try:
            context.signature = decode_image(context.snapshot.signature)
        except DocumentRenderError as exc:
            Log.warning(f"Could not add signature to page 1: {exc}")
            return context
        SignatureCompositor(context.document, context.layout).place(context.signature, page_number=1)
        return context


class DocumentPagesStep(ReportStep):
    def __init__(self, rasterizer: BasePdfRasterizer, zoom: float = 1.5) -> None:
        self._rasterizer = rasterizer
        self._zoom = zoom

    def run(self, context: ReportContext) -> ReportContext:
        compositor = DocumentCompositor(
            context.document,
            context.layout,
            context.require_decorator(),
            context.cursor,
            self._rasterizer,
            zoom=self._zoom,
        )
        before = context.document.page_count
        for upload, label in context.snapshot.document_plan():
            compositor.process(upload, label)
        Log.info(
            "Document pages added",
            pages=context.document.page_count - before,
            files=len(compositor.processed),
        )
        return context


class ContractPagesStep(ReportStep):
    def __init__(
        self,
        contract_rasterizer: ContractRasterizer,
        city: str,
        counterparty: str,
        clipping: bool = True,
    ) -> None:
        self._contract_rasterizer = contract_rasterizer
        self._city = city
        self._counterparty = counterparty
        self._clipping = clipping

    def run(self, context: ReportContext) -> ReportContext:
        snapshot = context.snapshot
        block = SignatureBlock(
            city=self._city,
            signed_on=context.generated_on,
            signer_name=snapshot.signer_name,
            signer_role=snapshot.signer_role,
            signer_document=snapshot.signer_document,
            counterparty=self._counterparty,
            signature=context.signature,
        )
        image = self._contract_rasterizer.rasterize(context.contract_html, block)
        painter = ContractPainter(
            context.document, context.layout, context.require_decorator(), clipping=self._clipping
        )
        context.contract_pages = painter.paint(image)
        return context


class FinalizeStep(ReportStep):
    def __init__(self, filename_prefix: str) -> None:
        self._filename_prefix = filename_prefix

    def run(self, context: ReportContext) -> ReportContext:
        content = context.document.render(title=context.settings.title)
        context.report = GeneratedReport(
            content=content,
            filename=build_report_filename(self._filename_prefix, context.snapshot.signer_name),
            page_count=context.document.page_count,
        )
        Log.info(
            "Report rendered",
            filename=context.report.filename,
            pages=context.report.page_count,
            size=len(content),
        )
        return context


def _add_address(fields: FieldRenderer, source: PersonalInfo | CompanyInfo) -> None:
    fields.add_section_title("Endereço")
    fields.add_field("Logradouro", source.address)
    fields.add_field("Número", source.number)
    fields.add_field("Complemento", source.complement)
    fields.add_field("Bairro", source.neighborhood)
    fields.add_field("Cidade/UF", source.city)
    fields.add_field("CEP", source.zip_code)
