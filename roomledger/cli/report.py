"""CLI entry point printing the monthly dashboard.

Usage:
    python -m roomledger.cli.report
    python -m roomledger.cli.report --month 2024-06

Exit Codes:
    0 - Success: report printed
    1 - Failure: configuration, argument or data error
"""

import argparse
import sys
from datetime import date

from sqlalchemy.exc import SQLAlchemyError

from roomledger.services import configure_database
from roomledger.services.config import load_config
from roomledger.services.errors import LedgerError
from roomledger.services.locale_service import configure_locale
from roomledger.services.logging import setup_logging


def render_report(view) -> str:
    """Render a DashboardView as plain text."""
    from roomledger.services.locale_service import format_amount, format_month_label

    summary = view.summary
    lines = [
        f"Dashboard for {format_month_label(summary.month)}",
        f"  Active tenants:     {summary.active_count}",
        f"  Tenants who left:   {summary.inactive_count}",
        f"  Rooms:              {view.total_rooms}",
        f"  Rent collected:     {format_amount(summary.total_rent_collected)}",
        f"  Mess collected:     {format_amount(summary.total_mess_collected)}",
        f"  Total income:       {format_amount(summary.total_income)}",
        f"  Deposits held:      {format_amount(summary.total_deposits_held)}",
        f"  Pending rent:       {summary.pending_rent_count}",
    ]
    lines.extend(f"    - {tenant.name} ({tenant.phone})" for tenant in summary.pending_rent)
    lines.append(f"  Pending mess:       {summary.pending_mess_count}")
    lines.extend(f"    - {tenant.name} ({tenant.phone})" for tenant in summary.pending_mess)
    if view.notice:
        lines.append(f"! {view.notice}")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    """
    Print the dashboard for one month.

    Returns:
        Exit code: 0 for success, 1 for failure
    """
    parser = argparse.ArgumentParser(description="Print the monthly ledger dashboard")
    parser.add_argument("--month", help="Month as YYYY-MM (default: current month)")
    args = parser.parse_args(argv)

    logger = None
    try:
        config = load_config()
        logger = setup_logging(config.log_file, config.log_level)
        configure_database(config.database_url)
        configure_locale(config.locale)

        from roomledger import services
        from roomledger.services.dashboard_service import LedgerViewService
        from roomledger.services.ledger import format_month, month_start, parse_month
        from roomledger.services.store import LedgerStore

        month = parse_month(args.month) if args.month else month_start(date.today())
        logger.info(f"Building dashboard report for {format_month(month)}")

        services.init_db()
        db = services.SessionLocal()
        try:
            view = LedgerViewService(LedgerStore(db)).dashboard(month)
        finally:
            db.close()

        print(render_report(view))
        return 0 if view.notice is None else 1

    except KeyboardInterrupt:
        if logger:
            logger.warning("Report interrupted by user")
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (SQLAlchemyError, LedgerError) as e:
        if logger:
            logger.error(f"Report failed: {e}", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
