"""
IFFL Companion CLI

Command-line interface for browsing the master list and trade ledger
without running the API server.
"""

import argparse
import asyncio
import sys
from typing import Any

from iffl_companion.clients.sheets import SheetsAPIError, SheetsClient
from iffl_companion.config import Settings, configure_logging, get_settings
from iffl_companion.models.league import LeagueConfig, load_league_config
from iffl_companion.models.trade import Trade
from iffl_companion.services.catalog import ALL, POSITIONS, AssetCatalogService, SortOrder
from iffl_companion.services.ledger import TradeLedger, TradeLedgerService


class LeagueCompanion:
    """
    Read-only view of the league spreadsheet.

    Can be used as a library or via CLI.

    Example:
        async with LeagueCompanion() as league:
            for asset in await league.search_assets("allen"):
                print(asset["name"], asset["price_2025"])
    """

    def __init__(self, settings: Settings | None = None, sheets: SheetsClient | None = None):
        self.settings = settings or get_settings()
        self.sheets = sheets or SheetsClient(self.settings)
        self.catalog_service = AssetCatalogService(self.sheets)
        self.ledger_service = TradeLedgerService(self.sheets)
        self.league: LeagueConfig = load_league_config(self.settings.league_config_path)

    async def __aenter__(self):
        await self.sheets.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.sheets.__aexit__(exc_type, exc_val, exc_tb)

    async def search_assets(
        self,
        text: str = "",
        teams: list[str] | None = None,
        positions: list[str] | None = None,
        sort: str = SortOrder.HIGHEST.value,
    ) -> list[dict[str, Any]]:
        """Search the master list."""
        catalog = await self.catalog_service.ensure_loaded()
        assets = catalog.search(text, set(teams or [ALL]), set(positions or [ALL]), sort)
        return [a.model_dump() for a in assets]

    async def get_team(self, team: str) -> list[dict[str, Any]]:
        """Roster and picks for one team."""
        catalog = await self.catalog_service.ensure_loaded()
        return [a.model_dump() for a in catalog.filter_by_team(team)]

    async def get_ledger(self) -> TradeLedger:
        return await self.ledger_service.ensure_loaded()


def _print_assets(assets: list[dict[str, Any]]) -> None:
    print(f"{'Name':<28} {'Pos/Round':<14} {'Team':<12} {'2025':>8}")
    print("-" * 65)
    for a in assets:
        label = a["rookie_round"] if a["is_pick"] else a["position"]
        print(f"{a['name']:<28} {label:<14} {a['team']:<12} {a['price_2025']:>8}")


def _print_trade(trade: Trade) -> None:
    print(trade.title)
    print(f"  {trade.team1} receives: {', '.join(trade.team1_receives) or '-'}")
    print(f"  {trade.team2} receives: {', '.join(trade.team2_receives) or '-'}")


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the `iffl` command."""
    parser = argparse.ArgumentParser(
        description="IFFL league companion CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Most expensive quarterbacks and all picks
  iffl assets --position QB --position Picks

  # Cheapest assets on two teams
  iffl assets --team Jared --team Bill --sort Lowest

  # One team's roster
  iffl team Jared

  # This season's trades, newest first
  iffl trades

  # Search past seasons
  iffl history --search "Allen"
        """,
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: from IFFL_LOG_LEVEL or INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # assets command
    assets_parser = subparsers.add_parser("assets", help="Search players and picks")
    assets_parser.add_argument("--search", "-s", default="", help="Name contains")
    assets_parser.add_argument("--team", "-t", action="append", help="Team filter (repeatable)")
    assets_parser.add_argument(
        "--position", "-p",
        action="append",
        choices=POSITIONS,
        help="Position filter (repeatable)",
    )
    assets_parser.add_argument(
        "--sort",
        choices=[o.value for o in SortOrder],
        default=SortOrder.HIGHEST.value,
        help="Price order (default: Highest)",
    )

    # team command
    team_parser = subparsers.add_parser("team", help="Show a team's roster and picks")
    team_parser.add_argument("name", help="Team name")

    # trades command
    trades_parser = subparsers.add_parser("trades", help="Show one season's trades")
    trades_parser.add_argument("--year", "-y", default=None, help="Season (default: current)")

    # history command
    history_parser = subparsers.add_parser("history", help="Historical trade data")
    history_parser.add_argument("--search", "-s", default="", help="Filter trades")
    history_parser.add_argument("--span", type=int, default=3, help="Past seasons to show")

    # serve command
    subparsers.add_parser("serve", help="Run the API server")

    return parser


async def cli_main(args: argparse.Namespace):
    """Run one read-only command against the spreadsheet."""
    settings = get_settings()
    async with LeagueCompanion(settings) as companion:
        if args.command == "assets":
            assets = await companion.search_assets(
                args.search, args.team, args.position, args.sort
            )
            if not assets:
                print("No matching players or picks.")
                return
            _print_assets(assets)

        elif args.command == "team":
            assets = await companion.get_team(args.name)
            if not assets:
                print(f"No assets found for {args.name}.")
                return
            print(f"{args.name} - {len(assets)} assets\n")
            _print_assets(assets)

        elif args.command == "trades":
            year = args.year or settings.current_year
            ledger = await companion.get_ledger()
            if year in (settings.current_year, settings.current_year[2:]):
                trades = ledger.current_year_trades(year)
            else:
                trades = ledger.history(year)
            if not trades:
                print(f"No trades found for {year}.")
                return
            print(f"{year} Trades\n")
            for trade in trades:
                _print_trade(trade)
                print()

        elif args.command == "history":
            ledger = await companion.get_ledger()
            matching = TradeLedger(
                [t for trades in ledger.search(args.search).values() for t in trades]
            )
            years = matching.historical_years(int(settings.current_year), args.span)
            if not years:
                print("No historical trades found.")
                return
            for year in years:
                print(f"== {year} ==")
                for trade in matching.history(year):
                    _print_trade(trade)
                print()
            if ledger.skipped:
                print(f"({ledger.skipped} trades with unreadable dates not shown)")


def run_cli():
    """Entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging(args.log_level)

    if args.command == "serve":
        from iffl_companion.main import run

        run()
        return

    try:
        asyncio.run(cli_main(args))
    except SheetsAPIError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    run_cli()
