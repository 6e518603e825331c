"""End-to-end run of the CLI with the real report pipeline (no database)."""

from pathlib import Path
from unittest.mock import patch

import pymupdf
import pytest

from onboarding.main import main
from tests.factories import write_individual_manifest


@pytest.fixture(autouse=True)
def _offline(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CAPTCHA_DELAY_SECONDS", "0")


class TestReportPipeline:
    @patch("onboarding.report.images.LogoFetcher.fetch", return_value=None)
    def test_individual_registration_produces_report(self, _mock_fetch, tmp_path: Path) -> None:
        manifest = write_individual_manifest(tmp_path)
        out_dir = tmp_path / "out"

        assert main([str(manifest), "--no-db", "--output", str(out_dir)]) == 0

        report = out_dir / "Cadastro_Vemplan_Maria_da_Silva_Souza.pdf"
        assert report.exists()
        with pymupdf.open(report) as doc:  # type: ignore[no-untyped-call]
            page_count = doc.page_count
            cover = doc[0].get_text()
            last = doc[page_count - 1].get_text()
        # cover + 4 images + 1 PDF page + at least one contract page
        assert page_count >= 7
        assert "Maria da Silva Souza" in cover
        assert "529.982.247-25" in cover
        assert "Página 1" in cover
        assert f"Página {page_count}" in last

    @patch("onboarding.report.images.LogoFetcher.fetch", return_value=None)
    def test_mask_mode_contract_produces_report(
        self, _mock_fetch, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("CONTRACT_CLIPPING", "false")
        manifest = write_individual_manifest(tmp_path)

        assert main([str(manifest), "--no-db", "--output", str(tmp_path)]) == 0
        assert (tmp_path / "Cadastro_Vemplan_Maria_da_Silva_Souza.pdf").exists()
