import io

import pytest
from PIL import Image, ImageDraw

from onboarding.forms.models import (
    FormSnapshot,
    IndividualDocuments,
    PersonalInfo,
    ProfessionalInfo,
)
from tests.factories import VALID_CPF, make_pdf, make_png, make_upload


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    return make_pdf(1)


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    return make_pdf(2)


@pytest.fixture()
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture()
def signature_png() -> bytes:
    """A white stroke on a transparent canvas, as the signature pad produces."""
    img = Image.new("RGBA", (300, 100), (0, 0, 0, 0))
    ImageDraw.Draw(img).line([(20, 80), (150, 20), (280, 70)], fill=(255, 255, 255, 255), width=4)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def personal_info() -> PersonalInfo:
    return PersonalInfo(
        full_name="Maria da Silva Souza",
        nickname="Maria",
        birth_date="1990-04-25",
        gender="Feminino",
        marital_status="Casado(a)",
        nationality="Brasileira",
        rg="12.345.678-9",
        cpf=VALID_CPF,
        zip_code="05422-030",
        address="Avenida Pedroso de Morais",
        number="2701",
        complement="",
        neighborhood="Pinheiros",
        city="São Paulo/SP",
    )


@pytest.fixture()
def professional_info() -> ProfessionalInfo:
    return ProfessionalInfo(
        creci_number="123456-F",
        manager_name="Carlos",
        work_mode="Presencial",
        actuation_zone=("Zona Oeste", "Centro"),
        experience_time="3 anos",
        has_other_income="Não",
        cellphone="(11) 98765-4321",
        email="maria@example.com",
        uses_social_media="Sim",
        instagram="@maria.imoveis",
    )


@pytest.fixture()
def full_documents(multi_page_pdf_bytes: bytes) -> IndividualDocuments:
    """Four images and one two-page PDF, all distinct."""
    return IndividualDocuments(
        id_front=make_upload("rg_frente.png", make_png((800, 500), (200, 10, 10)), last_modified=1),
        id_back=make_upload("rg_verso.png", make_png((800, 500), (10, 200, 10)), last_modified=2),
        creci_front=make_upload("creci_frente.png", make_png((500, 800), (10, 10, 200)), last_modified=3),
        creci_back=make_upload("creci_verso.png", make_png((500, 800), (90, 90, 90)), last_modified=4),
        residence=make_upload(
            "comprovante.pdf", multi_page_pdf_bytes, mime_type="application/pdf", last_modified=5
        ),
    )


@pytest.fixture()
def snapshot(
    personal_info: PersonalInfo,
    professional_info: ProfessionalInfo,
    full_documents: IndividualDocuments,
    signature_png: bytes,
) -> FormSnapshot:
    return FormSnapshot(
        personal=personal_info,
        professional=professional_info,
        documents=full_documents,
        signature=signature_png,
    )
