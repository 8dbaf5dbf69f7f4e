"""Offline report of the persisted snapshot: ranks and payouts for both pools."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, List

from config import settings
from domain.models import PoolResult
from services.rules_engine import TiePolicy, calculate_payouts
from tracking.snapshot_store import SnapshotError, load_snapshot


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="pool-report", description="Show pool ranks and payouts")
    p.add_argument("--data-dir", type=str, help="Directory holding results.json")
    p.add_argument("--results", type=str, help="Explicit snapshot path (overrides --data-dir)")
    p.add_argument(
        "--tie-policy",
        choices=[t.value for t in TiePolicy],
        default=TiePolicy.EVEN_SPLIT.value,
        help="Payout rule for a three-or-more-way tie for first place",
    )
    p.add_argument("--pot", type=float, default=settings.POOL_POT, help="Pot per pool")
    p.add_argument("--json", action="store_true", help="Output JSON")
    return p


def build_report(result: PoolResult, *, pot: float, tie_policy: TiePolicy) -> Dict[str, Any]:
    report: Dict[str, Any] = {"season": result.season, "last_updated": result.last_updated}
    for pool_name, entries in (("team_pool", result.team_pool), ("goals_pool", result.goals_pool)):
        payouts = {
            p.participant: p.amount
            for p in calculate_payouts(entries, pot=pot, tie_policy=tie_policy)
        }
        rows: List[Dict[str, Any]] = [
            {
                "rank": e.rank,
                "participant": e.participant,
                "total": e.total,
                "payout": payouts.get(e.participant, 0),
            }
            for e in sorted(entries, key=lambda x: x.rank)
        ]
        report[pool_name] = rows
    return report


def _fmt_amount(amount: float) -> str:
    return f"{amount:.0f}" if float(amount).is_integer() else f"{amount:.2f}"


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    path = args.results or settings.results_path(args.data_dir)
    try:
        result = load_snapshot(path)
    except SnapshotError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    if result is None:
        print(f"No snapshot at {path}", file=sys.stderr)
        return 1
    report = build_report(result, pot=args.pot, tie_policy=TiePolicy(args.tie_policy))
    if args.json:
        print(json.dumps(report, indent=2, ensure_ascii=False))
        return 0
    print(f"Season {report['season']} (updated {report['last_updated']})")
    for pool_name, title in (("team_pool", "Team pool"), ("goals_pool", "Goals pool")):
        print(f"{title}:")
        for row in report[pool_name]:
            print(
                f"  {row['rank']:>2}. {row['participant']:<20} {row['total']:>6}"
                f"  payout {_fmt_amount(row['payout'])}"
            )
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
