#!/usr/bin/env python3
"""
TableVision CLI — dashboard summary, Excel export, and API server.

USAGE:
  tablevision summary orders                        # Fetch from Supabase / inbox CSVs
  tablevision summary sales --csv ./sales.csv       # Use a local CSV as the table
  tablevision export orders --output orders.xlsx    # Excel dashboard report
  tablevision export orders --insights              # Include AI insights (needs OPENAI_API_KEY)
  tablevision serve --port 8000                     # Start API server
"""
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from tablevision.config import EXPORTS_FOLDER
from tablevision.controller import DashboardController
from tablevision.data.loader import load_csv_rows
from tablevision.data.source import DataSource, MemorySource
from tablevision.insights import generate_insights
from tablevision.logging_setup import configure_logging


def _skip_insights(table, rows):
    return None


def _source_for(args) -> DataSource:
    if args.csv:
        return MemorySource({args.table: load_csv_rows(Path(args.csv))})
    from tablevision.main import build_source
    return build_source()


def _load(args, with_insights: bool = False) -> DashboardController:
    """Fetch the table through a controller that runs insights inline."""
    controller = DashboardController(
        _source_for(args),
        args.table,
        insight_fn=generate_insights if with_insights else _skip_insights,
        run_in_background=lambda fn: fn(),
    )
    controller.refresh()
    controller.close()
    if controller.error is not None:
        print(f"\n  ERROR: {controller.error}")
        print(f"  {controller.error.recovery}\n")
        sys.exit(1)
    return controller


def cmd_summary(args):
    """Print the dashboard views for one table."""
    controller = _load(args)
    analytics = controller.analytics()

    print("\n" + "=" * 70)
    print(f"  TABLEVISION — {args.table.upper()}")
    print("=" * 70)

    if analytics is None:
        print(f"\n  No data available in {args.table}\n")
        return

    k = analytics.keys
    print(f"\n  Records: {analytics.row_count:,}")
    print(f"  Columns: date={k.date_key}  category={k.category_key}  revenue={k.revenue_key}  "
          f"expense={k.expense_key}  profit={k.profit_key}  id={k.id_key}")

    print(f"\nMONTHLY ({len(analytics.monthly)}):\n")
    for m in analytics.monthly:
        print(f"  {m.label:<10}${m.revenue:>14,.2f}  ${m.profit:>14,.2f}")

    print(f"\nCATEGORIES ({len(analytics.categories)}):\n")
    for c in analytics.categories:
        print(f"  {c.name[:30]:<32}${c.revenue:>12,.2f}  ${c.expenses:>12,.2f}  {c.margin_percent:>6.1f}%  {c.color}")

    print("\nTOP EXPENSES:\n")
    for i, c in enumerate(analytics.expenses_by_category, 1):
        print(f"  {i:<4}{c.name[:30]:<32}${c.expenses:>12,.2f}")

    print("\nTOP ROWS BY PROFIT:\n")
    for i, r in enumerate(analytics.top_rows, 1):
        ident = r.row.get(k.id_key, "N/A")
        print(f"  {i:<4}{str(ident)[:24]:<26}${r.revenue:>12,.2f}  ${r.profit:>12,.2f}")
    print()


def cmd_export(args):
    """Write the Excel dashboard report for one table."""
    from tablevision.api.router_export import export_filename
    from tablevision.reports.dashboard_report import generate_excel

    controller = _load(args, with_insights=args.insights)
    analytics = controller.analytics()
    if analytics is None:
        print(f"\n  No data available in {args.table}; nothing exported\n")
        sys.exit(1)

    out = Path(args.output) if args.output else EXPORTS_FOLDER / export_filename(args.table)
    out.parent.mkdir(parents=True, exist_ok=True)
    generate_excel(args.table, analytics, out, controller.insights)
    print(f"\n  {analytics.row_count:,} records  |  {len(analytics.categories)} categories")
    print(f"  Report saved to: {out}\n")


def cmd_serve(args):
    """Start the API server."""
    import uvicorn
    print(f"\nStarting TableVision API on port {args.port}...")
    uvicorn.run("tablevision.main:app", host="0.0.0.0", port=args.port, reload=args.reload,
                timeout_keep_alive=65)


def main():
    parser = argparse.ArgumentParser(
        description="TableVision — real-time financial dashboard for any table",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    # summary subcommand
    summary_parser = subparsers.add_parser("summary", help="Print dashboard views for a table")
    summary_parser.add_argument("table", help="Table name")
    summary_parser.add_argument("--csv", help="Read the table from this CSV instead of the source")
    summary_parser.set_defaults(func=cmd_summary)

    # export subcommand
    export_parser = subparsers.add_parser("export", help="Export the Excel dashboard report")
    export_parser.add_argument("table", help="Table name")
    export_parser.add_argument("--csv", help="Read the table from this CSV instead of the source")
    export_parser.add_argument("--output", help="Output .xlsx path (default: exports folder)")
    export_parser.add_argument("--insights", action="store_true", help="Include AI insights")
    export_parser.set_defaults(func=cmd_export)

    # serve subcommand
    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        return

    configure_logging()
    args.func(args)


if __name__ == "__main__":
    main()
