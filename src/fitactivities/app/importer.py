"""
Importer — parses a list of FIT files one at a time in the background.

Flow for an import run:
  1. start(paths): every activity is NotAsked; the first moves to Loading and
     a ParseRequest for it is returned
  2. the owner awaits execute(request) (decode + aggregate in the thread pool)
     and hands the resulting ParseFileResult to apply()
  3. apply() stores Success/Failure on that activity and returns the request
     for the next one, or None when the list is done

Only one parse is ever in flight. A failed file keeps its slot in the list and
its error goes to the error log; the run carries on with the next file.

Every run has a generation number. reload() starts a new generation, and
apply() ignores results from older ones, so a parse that was still running
when the user reloaded can't write into the new list.
"""
import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from fitactivities.analysis.aggregator import aggregate_decoded
from fitactivities.asyncdata import AsyncData
from fitactivities.fit.decoder import decode_fit_file
from fitactivities.models.activity import Activity, ActivityData

logger = logging.getLogger(__name__)


def load_activity(path: str) -> ActivityData:
    """Decode a FIT file and aggregate it. Runs in a worker thread."""
    return aggregate_decoded(decode_fit_file(Path(path)))


@dataclass(frozen=True)
class ParseRequest:
    generation: int
    position: int  # index in import (discovery) order
    path: str


@dataclass(frozen=True)
class ParseFileResult:
    generation: int
    position: int
    data: AsyncData


@dataclass(frozen=True)
class ImportFailure:
    path: str
    error: Exception

    def __str__(self) -> str:
        return f"{Path(self.path).name}: {self.error}"


# ─── Progress over any activity list ──────────────────────────────────────────

def activities_parsed(activities: Iterable[Activity]) -> int:
    return sum(1 for act in activities if act.data.is_success())


def activities_failed(activities: Iterable[Activity]) -> int:
    return sum(1 for act in activities if act.data.is_failure())


def activities_parsing(activities: Iterable[Activity]) -> bool:
    return any(act.data.is_not_asked() or act.data.is_loading() for act in activities)


class Importer:
    """Drives the NotAsked → Loading → Success/Failure cycle of each activity."""

    def __init__(self, parse_file: Callable[[str], ActivityData] = load_activity):
        """
        Args:
            parse_file: path → ActivityData, raising on any decode problem.
                Called in the default thread pool executor.
        """
        self._parse_file = parse_file
        self.generation = 0
        self.activities: List[Activity] = []  # discovery order
        self.errors: List[ImportFailure] = []
        self._cursor = -1
        self._previous: Dict[str, ActivityData] = {}

    # ─── Run control ──────────────────────────────────────────────────────────

    def start(self, paths: List[str]) -> Optional[ParseRequest]:
        """Begin a fresh import of `paths`. Returns the first ParseRequest."""
        self._previous = {}
        return self._begin(paths)

    def reload(self, paths: List[str]) -> Optional[ParseRequest]:
        """
        Throw away the current run and import `paths` from scratch.

        Activities that parsed successfully last time show their old data
        while loading again.
        """
        # files the interrupted run had not reached yet keep their older data
        previous = dict(self._previous)
        previous.update(
            (act.path, act.data.get_success())
            for act in self.activities
            if act.data.is_success()
        )
        self._previous = previous
        logger.info("Reloading %d FIT files", len(paths))
        return self._begin(paths)

    def _begin(self, paths: List[str]) -> Optional[ParseRequest]:
        self.generation += 1
        self.activities = [Activity(path=path) for path in paths]
        self.errors = []
        self._cursor = -1
        logger.info(
            "Import run %d started with %d FIT files", self.generation, len(paths)
        )
        return self._advance()

    def _advance(self) -> Optional[ParseRequest]:
        self._cursor += 1
        if self._cursor >= len(self.activities):
            logger.info(
                "Import run %d finished: %d parsed, %d failed",
                self.generation,
                self.parsed(),
                self.failed(),
            )
            return None
        activity = self.activities[self._cursor]
        activity.data = AsyncData.loading(self._previous.get(activity.path))
        return ParseRequest(self.generation, self._cursor, activity.path)

    def apply(self, result: ParseFileResult) -> Optional[ParseRequest]:
        """
        Store a parse result and move on to the next activity.

        Returns:
            The next ParseRequest, or None if the run is done or the result
            belongs to an older generation.
        """
        if result.generation != self.generation:
            logger.debug(
                "Ignoring result of import run %d (current run is %d)",
                result.generation,
                self.generation,
            )
            return None
        if result.position != self._cursor:
            logger.debug("Ignoring result for position %d (expected %d)", result.position, self._cursor)
            return None

        activity = self.activities[result.position]
        activity.data = result.data
        activity.reset_record_index()

        error = result.data.get_failure()
        if error is not None:
            self.errors.append(ImportFailure(activity.path, error))
        else:
            logger.debug("Parsed %s", activity.path)

        return self._advance()

    # ─── Background parse ─────────────────────────────────────────────────────

    async def execute(self, request: ParseRequest) -> ParseFileResult:
        """
        Parse one file in the thread pool.

        Never raises for a bad file: any exception from parse_file becomes a
        Failure in the returned message.
        """
        loop = asyncio.get_event_loop()
        try:
            data = await loop.run_in_executor(None, self._parse_file, request.path)
        except Exception as exc:
            logger.warning("Failed to parse %s: %s", request.path, exc)
            return ParseFileResult(request.generation, request.position, AsyncData.failure(exc))
        return ParseFileResult(request.generation, request.position, AsyncData.success(data))

    async def import_all(self, paths: List[str]) -> None:
        """Run a whole import to completion without a controller."""
        request = self.start(paths)
        while request is not None:
            request = self.apply(await self.execute(request))

    # ─── Progress ─────────────────────────────────────────────────────────────

    def parsed(self) -> int:
        return activities_parsed(self.activities)

    def failed(self) -> int:
        return activities_failed(self.activities)

    def parsing(self) -> bool:
        return activities_parsing(self.activities)
