"""High-level orchestration of one pool update run.

    roster -> fetch (paced) -> classify -> locate -> resolve -> aggregate
           -> score -> integrity gate -> persist

Configuration problems (unreadable roster, missing API credential, unreadable
previous snapshot) raise before the first fetch. Per-source failures are
isolated by the paced runner and contribute nothing. A gate failure raises
``IntegrityGateError`` and the snapshot on disk stays untouched.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Protocol

from config import settings, sources
from config.sources import SourcePage
from core import filesystem
from core.http_client import Fetcher
from core.scheduler import (
    DelayPolicy,
    FixedDelay,
    PacedRunner,
    ProgressCallback,
    RunReport,
    SourceTask,
)
from domain.mapping import EntityResolver
from domain.models import PoolResult, Roster
from domain.roster import load_roster
from parsing.scorer_parser import parse_team_goalscorers, parse_top_scorers
from parsing.standings_parser import parse_standings
from services import api_football
from services.aggregator import AggregatedMetrics, AggregationContext
from services.integrity_gate import GateReport, enforce
from services.rules_engine import compute_results
from tracking.snapshot_store import load_snapshot, save_snapshot
from utils import naming

log = logging.getLogger(__name__)

SOURCE_WIKI = "wiki"
SOURCE_API = "api"
SOURCES = (SOURCE_WIKI, SOURCE_API)


class DocumentFetcher(Protocol):
    def fetch(self, url: str) -> str: ...


@dataclass
class UpdateOutcome:
    result: PoolResult
    run_report: RunReport
    gate_report: GateReport
    snapshot_path: str
    written: bool
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "snapshot_path": self.snapshot_path,
            "written": self.written,
            "season": self.result.season,
            "last_updated": self.result.last_updated,
            "sources_ok": len(self.run_report.succeeded),
            "sources_failed": [f.to_dict() for f in self.run_report.failed],
            "warnings": list(self.warnings),
            "team_pool": [
                {"rank": e.rank, "participant": e.participant, "total_points": e.total_points}
                for e in self.result.team_pool
            ],
            "goals_pool": [
                {"rank": e.rank, "participant": e.participant, "total_goals": e.total_goals}
                for e in self.result.goals_pool
            ],
        }


class WikiSource:
    """Page-scraping source: league pages, UEFA pages, then club season pages.

    Club season pages are only fetched for players that the league and UEFA
    pages left without any goal fact.
    """

    def __init__(
        self,
        fetcher: DocumentFetcher,
        resolver: EntityResolver,
        *,
        league_pages: Optional[List[SourcePage]] = None,
        uefa_pages: Optional[List[SourcePage]] = None,
        club_pages: Optional[Callable[[List[str]], Mapping[str, List[str]]]] = None,
        archive_dir: Optional[str] = None,
    ) -> None:
        self.fetcher = fetcher
        self.resolver = resolver
        self.league_pages = league_pages if league_pages is not None else sources.LEAGUE_PAGES
        self.uefa_pages = uefa_pages if uefa_pages is not None else sources.UEFA_PAGES
        self.club_pages = club_pages or sources.club_pages_for
        self.archive_dir = archive_dir

    def _fetch(self, name: str, url: str) -> str:
        html = self.fetcher.fetch(url)
        if self.archive_dir:
            filesystem.write_text(
                os.path.join(self.archive_dir, f"{naming.sanitize(name)}.html"), html
            )
        return html

    def _merge_scorers(self, ctx: AggregationContext, scorers: Mapping[str, int], source: str) -> int:
        pairs = []
        for raw, goals in scorers.items():
            player = self.resolver.resolve_player(raw)
            if player:
                pairs.append((player, goals))
        return ctx.merge_document_goals(pairs, source)

    def load_competition(self, ctx: AggregationContext, page: SourcePage) -> None:
        html = self._fetch(page.name, page.url)
        standings = parse_standings(html)
        matched = 0
        for raw, points in standings.items():
            team = self.resolver.resolve_team(raw)
            if not team:
                continue
            if page.kind == sources.KIND_UEFA:
                ctx.record_uefa_points(team, points, page.competition or page.name)
            else:
                ctx.record_league_points(team, points, page.name)
            matched += 1
        scorers = parse_top_scorers(html)
        scorer_matched = self._merge_scorers(ctx, scorers, page.name)
        log.info(
            "%s: %d teams (%d matched), %d scorers (%d matched)",
            page.name,
            len(standings),
            matched,
            len(scorers),
            scorer_matched,
        )

    def load_club_page(self, ctx: AggregationContext, url: str, players: List[str]) -> None:
        html = self._fetch(url.rsplit("/", 1)[-1], url)
        scorers = parse_team_goalscorers(html, players)
        wanted = set(players)
        pairs = []
        for raw, goals in scorers.items():
            player = self.resolver.resolve_player(raw)
            if player in wanted:
                pairs.append((player, goals))
        ctx.merge_document_goals(pairs, url)
        found = {p for p, _ in pairs}
        for player in players:
            if player not in found:
                log.warning("%s: not in team scorers (%d listed)", player, len(scorers))

    def _club_tasks(self, ctx: AggregationContext, roster: Roster) -> Iterator[SourceTask]:
        missing = [p for p in roster.player_names() if not ctx.has_goal_facts(p)]
        if not missing:
            return
        grouped = self.club_pages(missing)
        covered = {p for group in grouped.values() for p in group}
        for player in missing:
            if player not in covered:
                log.warning("No team page URL for %s", player)
        log.info("Scraping team season pages for %d missing players", len(covered))
        for url, players in grouped.items():
            yield SourceTask(
                f"club {url.rsplit('/', 1)[-1]}",
                lambda u=url, ps=list(players): self.load_club_page(ctx, u, ps),
            )

    def tasks(self, ctx: AggregationContext, roster: Roster) -> Iterator[SourceTask]:
        for page in list(self.league_pages) + list(self.uefa_pages):
            yield SourceTask(page.name, lambda p=page: self.load_competition(ctx, p))
        # Evaluated lazily: runs after the league and UEFA tasks have completed
        yield from self._club_tasks(ctx, roster)


def _warn_unmatched(metrics: AggregatedMetrics) -> List[str]:
    warnings = []
    for team in metrics.unmatched_teams:
        warnings.append(f"team {team}: no standings found")
    for player in metrics.unmatched_players:
        warnings.append(f"player {player}: no goals found")
    for w in warnings:
        log.warning(w)
    return warnings


def run_update(
    data_dir: Optional[str] = None,
    *,
    source: str = SOURCE_WIKI,
    fetcher: Optional[DocumentFetcher] = None,
    delay_policy: Optional[DelayPolicy] = None,
    sleep: Optional[Callable[[float], None]] = None,
    now: Optional[datetime] = None,
    dry_run: bool = False,
    archive_dir: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    progress: Optional[ProgressCallback] = None,
    wiki_source_factory: Optional[Callable[[DocumentFetcher, EntityResolver], WikiSource]] = None,
) -> UpdateOutcome:
    """Run one update and persist the result when the integrity gate passes.

    Raises ``RosterError`` / ``ConfigurationError`` / ``SnapshotError`` before
    any fetch, and ``IntegrityGateError`` after scoring when the gate rejects
    the new result.
    """
    if source not in SOURCES:
        raise settings.ConfigurationError(f"Unknown source {source!r} (expected one of {SOURCES})")
    data_dir = data_dir or settings.DATA_DIR
    roster = load_roster(settings.rosters_path(data_dir))
    api_key = None
    api_season = 0
    if source == SOURCE_API:
        api_key = settings.require_api_key(dict(env) if env is not None else None)
        try:
            api_season = api_football.api_season(roster.season)
        except ValueError as e:
            raise settings.ConfigurationError(str(e)) from e
    snapshot_path = settings.results_path(data_dir)
    previous = load_snapshot(snapshot_path)

    ctx = AggregationContext()
    runner_kwargs: Dict[str, Any] = {"progress": progress}
    if sleep is not None:
        runner_kwargs["sleep"] = sleep

    owned: Optional[Fetcher] = None
    try:
        if source == SOURCE_API:
            if fetcher is None:
                owned = fetcher = api_football.build_fetcher(api_key or "")
            runner = PacedRunner(
                delay_policy or FixedDelay(settings.API_REQUEST_DELAY), **runner_kwargs
            )
            api = api_football.ApiFootballSource(
                fetcher, api_season  # type: ignore[arg-type]
            )
            tasks = api.tasks(ctx, roster)
        else:
            if fetcher is None:
                owned = fetcher = Fetcher()
            runner = PacedRunner(delay_policy or FixedDelay(), **runner_kwargs)
            resolver = EntityResolver.for_roster(roster.team_names(), roster.player_names())
            if wiki_source_factory is not None:
                wiki = wiki_source_factory(fetcher, resolver)
            else:
                wiki = WikiSource(fetcher, resolver, archive_dir=archive_dir)
            tasks = wiki.tasks(ctx, roster)
        run_report = runner.run(tasks)
    finally:
        if owned is not None:
            owned.close()

    metrics = ctx.finalize(roster)
    warnings = _warn_unmatched(metrics)
    result = compute_results(roster, metrics, now=now)
    gate_report = enforce(result, previous)

    written = False
    if not dry_run:
        save_snapshot(result, snapshot_path)
        written = True
    log.info(
        "Update complete: %d sources ok, %d failed, snapshot %s",
        len(run_report.succeeded),
        len(run_report.failed),
        "written" if written else "not written (dry run)",
    )
    return UpdateOutcome(
        result=result,
        run_report=run_report,
        gate_report=gate_report,
        snapshot_path=snapshot_path,
        written=written,
        warnings=warnings,
    )
