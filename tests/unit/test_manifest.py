import json
from pathlib import Path

import pytest

from onboarding.forms.models import RegistrationType
from onboarding.manifest import ManifestError, load_manifest, load_signature, load_upload


def _write(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestLoadManifest:
    def test_minimal_manifest(self, tmp_path: Path) -> None:
        manifest = load_manifest(_write(tmp_path / "m.json", {"signature": "assinatura.png"}))
        assert manifest.registration_type is RegistrationType.INDIVIDUAL
        assert manifest.signature == "assinatura.png"
        assert manifest.can_share_files is False

    def test_company_uploads_include_partner_slots(self, tmp_path: Path) -> None:
        manifest = load_manifest(_write(tmp_path / "m.json", {
            "registration_type": "PJ",
            "signature": "s.png",
            "documents": {"cnpj_card": "cnpj.png"},
            "partners": [
                {"info": {"name": "Ana"}, "documents": {"id_front": "ana.png"}},
                {"documents": {"id_front": "bia.png"}},
            ],
        }))
        assert manifest.registration_type is RegistrationType.COMPANY
        assert manifest.uploads == [
            ("cnpj_card", "cnpj.png"),
            ("partners[0].id_front", "ana.png"),
            ("partners[1].id_front", "bia.png"),
        ]

    def test_missing_signature_is_invalid(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestError, match="Invalid manifest"):
            load_manifest(_write(tmp_path / "m.json", {"documents": {}}))

    def test_unknown_registration_type_is_invalid(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestError, match="Invalid manifest"):
            load_manifest(_write(tmp_path / "m.json", {"signature": "s.png", "registration_type": "XX"}))

    @pytest.mark.parametrize(
        "data",
        [
            {"signature": "s.png", "personal": {"full_nam": "Maria"}},
            {"signature": "s.png", "professional": {"twitter": "@maria"}},
            {"signature": "s.png", "documents": {"cnpj_card": "cnpj.png"}},
            {"signature": "s.png", "registration_type": "PJ", "partners": [{"info": {"cpf": "1"}}]},
            {"signature": "s.png", "registration_type": "PJ", "partners": [{"documents": {"selfie": "x.png"}}]},
        ],
    )
    def test_unknown_keys_are_invalid(self, tmp_path: Path, data: dict[str, object]) -> None:
        with pytest.raises(ManifestError, match="unknown"):
            load_manifest(_write(tmp_path / "m.json", data))

    def test_unreadable_file(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestError, match="Cannot read manifest"):
            load_manifest(tmp_path / "missing.json")

    def test_malformed_json(self, tmp_path: Path) -> None:
        path = tmp_path / "m.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ManifestError, match="Cannot read manifest"):
            load_manifest(path)


class TestLoadFiles:
    def test_upload_guesses_mime_type(self, tmp_path: Path) -> None:
        (tmp_path / "comprovante.pdf").write_bytes(b"%PDF-1.4")
        upload = load_upload(tmp_path, "comprovante.pdf")
        assert upload.mime_type == "application/pdf"
        assert upload.size_bytes == 8
        assert upload.name == "comprovante.pdf"

    def test_missing_upload(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestError, match="Cannot read uploaded file"):
            load_upload(tmp_path, "nope.png")

    def test_missing_signature(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestError, match="Cannot read signature"):
            load_signature(tmp_path, "nope.png")
