"""Tests for the dashboard report CLI."""

import logging
from datetime import date
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import OperationalError

from roomledger import services
from roomledger.cli.report import main, render_report
from roomledger.services import locale_service
from roomledger.services.aggregation_service import MonthlySummary
from roomledger.services.dashboard_service import DashboardView


class TestRenderReport:
    def test_renders_figures_and_pending_names(self):
        pending = SimpleNamespace(name="Vikram Singh", phone="9876500002")
        summary = MonthlySummary(
            month=date(2024, 6, 1),
            active_count=2,
            inactive_count=1,
            pending_rent=[pending],
            total_rent_collected=14000,
            total_mess_collected=1500,
            total_deposits_held=8100,
        )

        text = render_report(DashboardView(summary=summary, total_rooms=2))

        assert "Dashboard for June 2024" in text
        assert "₹14,000" in text
        assert "₹15,500" in text
        assert "- Vikram Singh (9876500002)" in text
        pending_mess_line = next(line for line in text.splitlines() if "Pending mess:" in line)
        assert pending_mess_line.split(":")[1].strip() == "0"

    def test_renders_notice(self):
        view = DashboardView(
            summary=MonthlySummary.empty(date(2024, 6, 1)), notice="Failed to load data"
        )

        assert "! Failed to load data" in render_report(view)


class TestMain:
    @pytest.fixture(autouse=True)
    def isolated_runtime(self, monkeypatch, tmp_path):
        # Keep the CLI from replacing root handlers or the shared engine
        monkeypatch.setattr(
            "roomledger.cli.report.setup_logging",
            lambda log_file, level: logging.getLogger("roomledger"),
        )
        monkeypatch.setattr(services, "engine", services.engine)
        monkeypatch.setattr(services, "SessionLocal", services.SessionLocal)
        monkeypatch.setattr(services, "DATABASE_URL", services.DATABASE_URL)
        monkeypatch.setattr(locale_service, "LOCALE", locale_service.LOCALE)
        monkeypatch.setattr(locale_service, "CURRENCY", locale_service.CURRENCY)
        monkeypatch.chdir(tmp_path)

    def test_invalid_month_returns_error(self, capsys):
        assert main(["--month", "2024-13"]) == 1
        assert "Invalid month" in capsys.readouterr().err

    def test_prints_report_for_month(self, capsys):
        assert main(["--month", "2024-06"]) == 0
        assert "Dashboard for June 2024" in capsys.readouterr().out

    def test_reads_database_and_locale_from_environment(self, monkeypatch, tmp_path, capsys):
        db_file = tmp_path / "report.db"
        monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
        monkeypatch.setenv("LOCALE", "en_US")

        assert main(["--month", "2024-06"]) == 0

        assert db_file.exists()
        assert str(services.engine.url) == f"sqlite:///{db_file}"
        assert "$0" in capsys.readouterr().out

    def test_database_failure_returns_error(self, monkeypatch, capsys):
        def broken_init_db():
            raise OperationalError("CREATE TABLE", {}, Exception("unable to open database file"))

        monkeypatch.setattr(services, "init_db", broken_init_db)

        assert main(["--month", "2024-06"]) == 1
        assert "unable to open database file" in capsys.readouterr().err
