"""Pool update CLI.

Runs one full update: fetch sources, score both pools, pass the integrity
gate, write the snapshot.

Exit codes:
 - 0: success, snapshot written (or validated only, with ``--dry-run``)
 - 1: integrity gate rejected the new result; snapshot left untouched
 - 2: configuration error (roster unreadable, credential missing,
   previous snapshot unreadable); nothing was fetched

Example:
  pool-update --data-dir ./data --json
  API_FOOTBALL_KEY=... pool-update --source api
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict

from config import settings
from core.scheduler import FixedDelay
from domain.roster import RosterError
from services import pipeline
from services.integrity_gate import IntegrityGateError
from tracking.snapshot_store import SnapshotError

EXIT_OK = 0
EXIT_GATE_FAILED = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="pool-update", description="Update pool standings")
    p.add_argument("--data-dir", type=str, help="Directory holding rosters.json / results.json")
    p.add_argument(
        "--source",
        choices=pipeline.SOURCES,
        default=pipeline.SOURCE_WIKI,
        help="Data source: scraped pages (wiki) or the credentialed API (api)",
    )
    p.add_argument("--delay", type=float, help="Seconds to wait between source fetches")
    p.add_argument("--archive-dir", type=str, help="Also store every fetched page here")
    p.add_argument("--dry-run", action="store_true", help="Validate only; do not write the snapshot")
    p.add_argument("--json", action="store_true", help="Output JSON summary")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p


def _print_summary(summary: Dict[str, Any]) -> None:
    print(f"Pool update ({summary['season']}, {summary['last_updated']}):")
    print(f"  sources ok: {summary['sources_ok']}, failed: {len(summary['sources_failed'])}")
    for failure in summary["sources_failed"]:
        print(f"    x {failure['name']}: {failure['error']}")
    print("  Team pool:")
    for e in summary["team_pool"]:
        print(f"    {e['rank']:>2}. {e['participant']}: {e['total_points']}")
    print("  Goals pool:")
    for e in summary["goals_pool"]:
        print(f"    {e['rank']:>2}. {e['participant']}: {e['total_goals']}")
    state = "written" if summary["written"] else "not written (dry run)"
    print(f"  snapshot {state}: {summary['snapshot_path']}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        outcome = pipeline.run_update(
            args.data_dir,
            source=args.source,
            delay_policy=FixedDelay(args.delay) if args.delay is not None else None,
            dry_run=args.dry_run,
            archive_dir=args.archive_dir,
        )
    except (RosterError, settings.ConfigurationError, SnapshotError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except IntegrityGateError as e:
        print("Integrity gate failed; snapshot left unchanged:", file=sys.stderr)
        for issue in e.report.issues:
            print(f"  [{issue.rule}] {issue.message}", file=sys.stderr)
        return EXIT_GATE_FAILED

    summary = outcome.to_dict()
    if args.json:
        print(json.dumps(summary, indent=2, ensure_ascii=False))
    else:
        _print_summary(summary)
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
