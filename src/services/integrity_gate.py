"""Pre-persistence integrity gate.

Checks a freshly computed :class:`PoolResult` before it may replace the
persisted snapshot:

 - schema: every pool entry names a participant and carries a present,
   numeric, finite, non-negative total; ranks form the sequence 1..N;
 - monotonic: no participant of the previous snapshot has a lower total in
   the same pool of the new result.

Every violation is collected (not just the first) so a failed run can
enumerate all failing entities with their old/new values.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from domain.models import PoolResult

log = logging.getLogger(__name__)

RULE_SCHEMA = "schema"
RULE_MONOTONIC = "monotonic"

# (pool attribute, total attribute)
POOLS = (("team_pool", "total_points"), ("goals_pool", "total_goals"))


@dataclass
class IntegrityIssue:
    rule: str
    pool: str
    participant: Optional[str]
    message: str
    old: Any = None
    new: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class GateReport:
    issues: List[IntegrityIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.issues

    def by_rule(self, rule: str) -> List[IntegrityIssue]:
        return [i for i in self.issues if i.rule == rule]

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.valid, "issues": [i.to_dict() for i in self.issues]}


class IntegrityGateError(RuntimeError):
    def __init__(self, report: GateReport):
        self.report = report
        super().__init__(
            f"Integrity gate rejected results ({len(report.issues)} issue(s)): "
            + "; ".join(i.message for i in report.issues)
        )


def is_valid_total(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value >= 0


def _check_schema(result: PoolResult, pool: str, total_attr: str) -> List[IntegrityIssue]:
    issues: List[IntegrityIssue] = []
    entries: Sequence[Any] = getattr(result, pool)
    for entry in entries:
        name = entry.participant
        if not isinstance(name, str) or not name.strip():
            issues.append(
                IntegrityIssue(RULE_SCHEMA, pool, None, f"{pool}: entry without participant name")
            )
        total = getattr(entry, total_attr)
        if not is_valid_total(total):
            issues.append(
                IntegrityIssue(
                    RULE_SCHEMA,
                    pool,
                    name,
                    f"{pool}: {name} {total_attr} invalid ({total!r})",
                    new=total,
                )
            )
    ranks = [getattr(e, "rank", None) for e in entries]
    if ranks != list(range(1, len(entries) + 1)):
        issues.append(
            IntegrityIssue(
                RULE_SCHEMA, pool, None, f"{pool}: ranks are not 1..{len(entries)}: {ranks}"
            )
        )
    return issues


def _check_monotonic(
    new: PoolResult, previous: PoolResult, pool: str, total_attr: str
) -> List[IntegrityIssue]:
    issues: List[IntegrityIssue] = []
    current = {e.participant: getattr(e, total_attr) for e in getattr(new, pool)}
    for prev in getattr(previous, pool):
        if prev.participant not in current:
            continue
        old = getattr(prev, total_attr)
        now = current[prev.participant]
        if not is_valid_total(old):
            log.warning("%s: previous %s for %s unusable (%r)", pool, total_attr, prev.participant, old)
            continue
        if not is_valid_total(now):
            # already reported by the schema check
            continue
        if now < old:
            issues.append(
                IntegrityIssue(
                    RULE_MONOTONIC,
                    pool,
                    prev.participant,
                    f"{pool}: {prev.participant} {total_attr} dropped {old} -> {now}",
                    old=old,
                    new=now,
                )
            )
    return issues


def validate_results(new: PoolResult, previous: Optional[PoolResult] = None) -> GateReport:
    report = GateReport()
    for pool, total_attr in POOLS:
        report.issues.extend(_check_schema(new, pool, total_attr))
    if previous is not None:
        for pool, total_attr in POOLS:
            report.issues.extend(_check_monotonic(new, previous, pool, total_attr))
    return report


def enforce(new: PoolResult, previous: Optional[PoolResult] = None) -> GateReport:
    """Validate and raise :class:`IntegrityGateError` on any violation."""
    report = validate_results(new, previous)
    if not report.valid:
        for issue in report.issues:
            log.error("integrity: %s", issue.message)
        raise IntegrityGateError(report)
    return report
