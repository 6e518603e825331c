import argparse
import sys
from pathlib import Path

from onboarding.config.settings import Settings
from onboarding.database.connection import close_pool, init_pool
from onboarding.database.models import ManagerRecord
from onboarding.database.repositories.manager_repository import ManagerRepository
from onboarding.database.repositories.settings_repository import SettingsRepository
from onboarding.extraction.factory import ExtractorFactory
from onboarding.forms.models import RegistrationType
from onboarding.logging.logger import Log
from onboarding.manifest import (
    ManifestError,
    RegistrationManifest,
    load_manifest,
    load_signature,
    load_upload,
)
from onboarding.pdf.factory import PdfRasterizerFactory
from onboarding.postal.client import PostalCodeClient
from onboarding.report.assembler import build_assembler
from onboarding.report.defaults import DEFAULT_CONTRACT_HTML
from onboarding.report.exceptions import ReportError
from onboarding.report.models import ReportSettings
from onboarding.wizard.exceptions import StepTransitionError
from onboarding.wizard.session import OnboardingSession, SessionOptions


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="onboarding",
        description="Build the signed broker registration PDF from a manifest.",
    )
    parser.add_argument("manifest", type=Path, help="Registration manifest (JSON)")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("."),
        help="Directory the PDF is written to (default: current directory)",
    )
    parser.add_argument(
        "--no-db",
        action="store_true",
        help="Skip the record store and use the built-in contract and report settings",
    )
    return parser.parse_args(argv)


def build_session(
    settings: Settings,
    manifest: RegistrationManifest,
    report_settings: ReportSettings,
    contract_html: str,
    managers: list[ManagerRecord],
) -> OnboardingSession:
    """Build an OnboardingSession with all required adapters."""
    extractor = None
    if manifest.analyze_documents:
        extractor = ExtractorFactory.create(settings, PdfRasterizerFactory.create(settings))
    postal_client = None
    if manifest.lookup_postal_code:
        postal_client = PostalCodeClient(
            settings.postal_lookup_base_url,
            timeout_seconds=settings.postal_lookup_timeout_seconds,
        )
    return OnboardingSession(
        assembler=build_assembler(settings),
        report_settings=report_settings,
        contract_html=contract_html,
        managers=managers,
        extractor=extractor,
        postal_client=postal_client,
        registration_type=manifest.registration_type,
        options=SessionOptions(
            max_upload_size_mb=settings.max_upload_size_mb,
            captcha_delay_seconds=settings.captcha_delay_seconds,
            messaging_base_url=settings.messaging_base_url,
            messaging_text=settings.messaging_text,
        ),
    )


def run_manifest(session: OnboardingSession, manifest: RegistrationManifest, base_dir: Path) -> int:
    """Walk the wizard with the manifest's answers. Returns a process exit code."""
    if manifest.registration_type is RegistrationType.COMPANY:
        for _ in range(len(manifest.partners) - 1):
            session.add_partner()

    for slot, relative in manifest.uploads:
        error = session.attach_document(slot, load_upload(base_dir, relative))
        if error:
            Log.error(error, slot=slot)
            return 1

    if not session.verify_human():
        Log.error("Missing required documents", slots=session.missing_documents())
        return 1
    session.analyze_documents()

    if manifest.registration_type is RegistrationType.COMPANY:
        session.update_company(**manifest.company)
        for index, partner in enumerate(manifest.partners):
            session.update_partner(index, **partner.info)
        session.update_professional(**manifest.professional)
    else:
        session.update_personal(**manifest.personal)
        session.update_professional(**manifest.professional)
    if manifest.lookup_postal_code:
        session.lookup_postal_code()

    errors = session.submit_form()
    if errors:
        for name, message in sorted(errors.items()):
            Log.error(f"{name}: {message}")
        return 1

    session.mark_contract_read()
    session.agree(True)
    session.confirm_signature_match(True)
    session.sign(load_signature(base_dir, manifest.signature))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point: settings -> records -> wizard replay -> PDF on disk."""
    args = _parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    try:
        manifest = load_manifest(args.manifest)
    except ManifestError as exc:
        Log.error(str(exc))
        return 2

    use_db = not args.no_db
    if use_db:
        init_pool(settings)
    session: OnboardingSession | None = None
    try:
        if use_db:
            settings_repo = SettingsRepository()
            report_settings = settings_repo.get_report_settings()
            contract_html = settings_repo.get_contract_html()
            managers = ManagerRepository().list_all()
        else:
            report_settings, contract_html, managers = ReportSettings(), DEFAULT_CONTRACT_HTML, []

        session = build_session(settings, manifest, report_settings, contract_html, managers)
        exit_code = run_manifest(session, manifest, args.manifest.resolve().parent)
    except (ManifestError, StepTransitionError, ReportError) as exc:
        Log.error(str(exc))
        return 1
    finally:
        if session is not None:
            session.close()
        if use_db:
            close_pool()

    if exit_code != 0 or session is None or session.report is None:
        return exit_code or 1

    args.output.mkdir(parents=True, exist_ok=True)
    target = args.output / session.report.filename
    target.write_bytes(session.report.content)
    Log.info("Report written", path=str(target), pages=session.report.page_count)

    plan = session.handoff(can_share_files=manifest.can_share_files)
    print(plan.link)
    if plan.instructions:
        print(plan.instructions)
    return 0


if __name__ == "__main__":
    sys.exit(main())
