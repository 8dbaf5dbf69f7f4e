"""Sequential, paced execution of source tasks.

Sources are visited strictly one after another in the order given, with a
politeness delay between consecutive tasks. The delay is a policy object and
the sleep function is injectable, so tests never wait on the wall clock.
There is no delay after the final task.

A task that raises one of the isolated error types (transport / parsing by
default) is logged and recorded as failed; the loop moves on. Anything else
propagates.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Type

from config import settings
from core.http_client import HttpError
from parsing.errors import ParsingError

log = logging.getLogger(__name__)

ProgressCallback = Callable[[str, Dict[str, Any]], None]


class DelayPolicy:
    def delay_after(self, task: "SourceTask", failed: bool) -> float:  # pragma: no cover - interface
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class FixedDelay(DelayPolicy):
    seconds: float = settings.REQUEST_DELAY

    def delay_after(self, task: "SourceTask", failed: bool) -> float:
        return self.seconds


class NoDelay(DelayPolicy):
    def delay_after(self, task: "SourceTask", failed: bool) -> float:
        return 0.0


@dataclass(frozen=True, slots=True)
class SourceTask:
    name: str
    run: Callable[[], Any]


@dataclass(slots=True)
class TaskFailure:
    name: str
    error: str
    error_type: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "error": self.error, "error_type": self.error_type}


@dataclass(slots=True)
class RunReport:
    succeeded: List[str] = field(default_factory=list)
    failed: List[TaskFailure] = field(default_factory=list)
    slept: float = 0.0

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "succeeded": list(self.succeeded),
            "failed": [f.to_dict() for f in self.failed],
        }


class PacedRunner:
    def __init__(
        self,
        delay_policy: Optional[DelayPolicy] = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
        isolated_errors: Tuple[Type[BaseException], ...] = (HttpError, ParsingError),
        progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.delay_policy = delay_policy or FixedDelay()
        self._sleep = sleep
        self._isolated = isolated_errors
        self._progress = progress

    def _emit(self, event: str, payload: Dict[str, Any]) -> None:
        if self._progress:
            self._progress(event, payload)

    def run(self, tasks: Iterable[SourceTask], report: Optional[RunReport] = None) -> RunReport:
        """Run ``tasks`` in order.

        ``tasks`` is consumed lazily, so a generator may decide later tasks
        from the facts earlier ones produced. The delay owed by a task is
        slept just before the next one starts, so nothing is slept after the
        last task.
        """
        report = report if report is not None else RunReport()
        pending = 0.0
        for idx, task in enumerate(tasks, start=1):
            if pending > 0:
                self._sleep(pending)
                report.slept += pending
            self._emit("task_started", {"name": task.name, "index": idx})
            failed = False
            try:
                task.run()
            except self._isolated as e:
                failed = True
                log.warning("%s: %s", task.name, e)
                report.failed.append(TaskFailure(task.name, str(e), type(e).__name__))
            else:
                report.succeeded.append(task.name)
            self._emit("task_finished", {"name": task.name, "failed": failed})
            pending = self.delay_policy.delay_after(task, failed)
        return report
