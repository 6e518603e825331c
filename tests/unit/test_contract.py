"""Tests for contract layout, rasterisation and slicing across pages."""

from datetime import date
from unittest.mock import MagicMock

import pytest
from PIL import Image
from reportlab.lib.enums import TA_CENTER
from reportlab.platypus import HRFlowable, Paragraph, Spacer
from reportlab.platypus import Image as FlowableImage

from onboarding.pdf.exceptions import PdfRasterizationError
from onboarding.pdf.pymupdf_adapter import PyMuPdfAdapter
from onboarding.report.contract import (
    CONTRACT_PADDING,
    CONTRACT_WIDTH,
    ContractPainter,
    ContractRasterizer,
    SignatureBlock,
    _build_styles,
    contract_page_count,
    html_to_flowables,
    signature_flowables,
)
from onboarding.report.defaults import DEFAULT_CONTRACT_HTML
from onboarding.report.document import ImageOp, RectOp, ReportDocument
from onboarding.report.exceptions import ContractRenderError
from onboarding.report.layout import ReportLayout, resolve_layout
from onboarding.report.models import ReportSettings
from onboarding.report.painters import PageDecorator


def _block(signature: Image.Image | None = None) -> SignatureBlock:
    return SignatureBlock(
        city="São Paulo",
        signed_on=date(2026, 2, 1),
        signer_name="Maria da Silva Souza",
        signer_role="Corretor",
        signer_document="529.982.247-25",
        counterparty="VEMPLAN",
        signature=signature,
    )


def _painter(clipping: bool = True) -> tuple[ReportDocument, ReportLayout, ContractPainter]:
    layout = resolve_layout(ReportSettings())
    doc = ReportDocument(layout.page_width, layout.page_height)
    return doc, layout, ContractPainter(doc, layout, PageDecorator(doc, layout), clipping=clipping)


def _paragraph_texts(flowables: list[object]) -> list[str]:
    return [f.text for f in flowables if isinstance(f, Paragraph)]


class TestContractPageCount:
    def test_exact_multiple(self) -> None:
        assert contract_page_count(474, 237) == 2

    def test_partial_page_rounds_up(self) -> None:
        assert contract_page_count(475, 237) == 3

    def test_float_noise_on_exact_multiple(self) -> None:
        assert contract_page_count(237 * 3 + 1e-12, 237) == 3

    def test_empty_contract(self) -> None:
        assert contract_page_count(0, 237) == 0

    def test_non_positive_usable_height(self) -> None:
        with pytest.raises(ValueError):
            contract_page_count(100, 0)


class TestContractPainterClipping:
    def test_exact_multiple_fills_two_pages(self) -> None:
        doc, _, painter = _painter()
        # 180 x 474 px scales to 180 x 474 mm, exactly two usable bands.
        pages = painter.paint(Image.new("RGB", (180, 474), (255, 255, 255)))
        assert pages == 2
        assert doc.page_count == 3

    def test_slices_are_offset_by_usable_height(self) -> None:
        doc, layout, painter = _painter()
        painter.paint(Image.new("RGB", (180, 600)))

        ys = [doc.images(page)[0].y for page in range(2, doc.page_count + 1)]
        assert ys == [pytest.approx(35 - i * 237) for i in range(3)]
        for page in range(2, doc.page_count + 1):
            (op,) = doc.images(page)
            assert op.clip == (0.0, layout.content_top, layout.page_width, layout.usable_height)
            assert (op.x, op.width) == (15, 180)
            assert op.height == pytest.approx(600)

    def test_every_slice_page_is_decorated(self) -> None:
        doc, _, painter = _painter()
        painter.paint(Image.new("RGB", (180, 300)))
        assert [op.text for op in doc.texts(2)][-1] == "Página 2"
        assert [op.text for op in doc.texts(3)][-1] == "Página 3"

    def test_scaled_height_uses_content_width(self) -> None:
        _, _, painter = _painter()
        assert painter.scaled_height(Image.new("RGB", (1560, 3120))) == pytest.approx(360)


class TestContractPainterMasking:
    def test_masks_header_and_footer_bands(self) -> None:
        doc, layout, painter = _painter(clipping=False)
        painter.paint(Image.new("RGB", (180, 300)))

        for page in (2, 3):
            ops = doc.ops(page)
            rects = [op for op in ops if isinstance(op, RectOp)]
            assert rects == [
                RectOp(0, 0, 210, 34.5, color=(255, 255, 255)),
                RectOp(0, 272.5, 210, 25, color=(255, 255, 255)),
            ]
            image = next(op for op in ops if isinstance(op, ImageOp))
            assert image.clip is None
            # Header and footer are redrawn after the image and masks.
            assert ops.index(image) < ops.index(rects[0])
            assert [op.text for op in doc.texts(page)][-1] == f"Página {page}"


class TestHtmlToFlowables:
    def test_paragraph_with_inline_markup(self) -> None:
        flowables = html_to_flowables("<p>Olá <strong>mundo</strong> <em>feliz</em></p>")
        assert _paragraph_texts(flowables) == ["Olá <b>mundo</b> <i>feliz</i>"]

    def test_entities_are_escaped(self) -> None:
        flowables = html_to_flowables("<p>A &amp; B &lt; C</p>")
        assert _paragraph_texts(flowables) == ["A &amp; B &lt; C"]

    def test_unordered_list_gets_bullets(self) -> None:
        flowables = html_to_flowables("<ul>\n  <li>um</li>\n  <li>dois</li>\n</ul>")
        assert _paragraph_texts(flowables) == ["• um", "• dois"]

    def test_ordered_list_is_numbered(self) -> None:
        flowables = html_to_flowables("<ol><li>um</li><li>dois</li></ol>")
        assert _paragraph_texts(flowables) == ["1. um", "2. dois"]

    def test_paragraph_inside_item_keeps_bullet(self) -> None:
        flowables = html_to_flowables("<ul><li><p>um</p><p>mais</p></li></ul><ol><li><p>dois</p></li></ol>")
        assert _paragraph_texts(flowables) == ["• um", "mais", "1. dois"]

    def test_empty_item_leaves_no_bullet(self) -> None:
        flowables = html_to_flowables("<ol><li></li><li>dois</li></ol><p>fim</p>")
        assert _paragraph_texts(flowables) == ["2. dois", "fim"]

    def test_inline_alignment_and_weight(self) -> None:
        (title,) = html_to_flowables('<div style="text-align: center; font-weight: bold;">CONTRATO</div>')
        assert title.text == "<b>CONTRATO</b>"
        assert title.style.alignment == TA_CENTER

    def test_heading_style(self) -> None:
        (heading,) = html_to_flowables("<h4>DO OBJETO</h4>")
        assert heading.style.name == "ContractH4"

    def test_horizontal_rule(self) -> None:
        flowables = html_to_flowables("<p>a</p><hr><p>b</p>")
        assert isinstance(flowables[1], HRFlowable)

    def test_empty_html(self) -> None:
        assert html_to_flowables("") == []

    def test_default_contract_parses(self) -> None:
        texts = _paragraph_texts(html_to_flowables(DEFAULT_CONTRACT_HTML))
        assert texts[0].startswith("<b>INSTRUMENTO PARTICULAR")
        assert any(text.startswith("• 2.1.1.") for text in texts)


class TestSignatureBlock:
    def test_dated_line_is_long_portuguese_date(self) -> None:
        assert _block().dated_line == "São Paulo, 1 de fevereiro de 2026"

    def test_flowables_without_signature_reserve_space(self) -> None:
        flowables = signature_flowables(_block(), _build_styles())
        assert not any(isinstance(f, FlowableImage) for f in flowables)
        assert any(isinstance(f, Spacer) and f.height == 65 for f in flowables)
        assert _paragraph_texts(flowables) == [
            "São Paulo, 1 de fevereiro de 2026",
            "Maria da Silva Souza",
            "Corretor - Documento: 529.982.247-25",
            "VEMPLAN",
        ]

    def test_flowables_with_signature_embed_image(self) -> None:
        flowables = signature_flowables(_block(Image.new("RGBA", (300, 100))), _build_styles())
        (image,) = [f for f in flowables if isinstance(f, FlowableImage)]
        assert image.drawHeight == 60
        assert image.drawWidth == pytest.approx(180)

    def test_blank_signer_uses_placeholder_name(self) -> None:
        block = SignatureBlock(
            city="São Paulo",
            signed_on=date(2026, 2, 1),
            signer_name="",
            signer_role="Corretor",
            signer_document="",
            counterparty="VEMPLAN",
        )
        texts = _paragraph_texts(signature_flowables(block, _build_styles()))
        assert "Nome do Responsável" in texts
        assert "Corretor - Documento: -" in texts


class TestContractRasterizer:
    def test_renders_single_tall_raster(self) -> None:
        image = ContractRasterizer(PyMuPdfAdapter()).rasterize(DEFAULT_CONTRACT_HTML, _block())
        assert image.width == pytest.approx((CONTRACT_WIDTH + 2 * CONTRACT_PADDING) * 2, abs=2)
        assert image.height > image.width

    def test_longer_contract_is_taller(self) -> None:
        rasterizer = ContractRasterizer(PyMuPdfAdapter())
        short = rasterizer.rasterize("<p>curto</p>", _block())
        long = rasterizer.rasterize("<p>cláusula</p>" * 80, _block())
        assert long.height > short.height

    def test_rasterization_failure_is_wrapped(self) -> None:
        pdf_rasterizer = MagicMock()
        pdf_rasterizer.rasterize.side_effect = PdfRasterizationError("broken")
        with pytest.raises(ContractRenderError, match="rasterization failed"):
            ContractRasterizer(pdf_rasterizer).rasterize("<p>x</p>", _block())

    def test_unexpected_page_count_is_rejected(self) -> None:
        pdf_rasterizer = MagicMock()
        pdf_rasterizer.rasterize.return_value = [Image.new("RGB", (10, 10))] * 2
        with pytest.raises(ContractRenderError, match="Expected one contract raster"):
            ContractRasterizer(pdf_rasterizer).rasterize("<p>x</p>", _block())
