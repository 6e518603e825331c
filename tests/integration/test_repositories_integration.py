from collections.abc import Callable

import pytest

from onboarding.database.repositories.manager_repository import ManagerRepository
from onboarding.database.repositories.settings_repository import SettingsRepository
from onboarding.report.defaults import DEFAULT_CONTRACT_HTML
from onboarding.report.models import ReportSettings


@pytest.mark.integration
class TestManagerRepositoryListAll:
    def test_returns_seeded_managers_sorted_by_name(self, seed_managers: list[int]) -> None:
        managers = [m for m in ManagerRepository().list_all() if m.name.startswith("zz-test")]
        assert [m.name for m in managers] == ["zz-test Ana", "zz-test Carlos"]
        assert managers[0].phone == ""
        assert managers[1].phone == "(11) 3456-7890"
        assert {m.id for m in managers} == set(seed_managers)


@pytest.mark.integration
class TestSettingsRepository:
    def test_defaults_when_table_is_empty(self, clean_settings: None) -> None:
        repo = SettingsRepository()
        assert repo.find("report") is None
        assert repo.get_report_settings() == ReportSettings()
        assert repo.get_contract_html() == DEFAULT_CONTRACT_HTML

    def test_partial_report_settings_are_merged(
        self, store_setting: Callable[[str, object], None]
    ) -> None:
        store_setting("report", {"title": "Ficha Cadastral", "margin_left": 20})

        settings = SettingsRepository().get_report_settings()

        assert settings.title == "Ficha Cadastral"
        assert settings.margin_left == 20.0
        assert settings.primary_color == ReportSettings().primary_color

    def test_stored_contract_template(self, store_setting: Callable[[str, object], None]) -> None:
        store_setting("contract", {"html": "<p>Contrato {{NOME}}</p>"})

        repo = SettingsRepository()

        assert repo.get_contract_html() == "<p>Contrato {{NOME}}</p>"
        record = repo.find("contract")
        assert record is not None
        assert record.updated_at is not None
