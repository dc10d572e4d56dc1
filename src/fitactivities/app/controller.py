"""
ActivitiesController — owns all browsing state and is its only writer.

State: the activity list (sorted for display), the selected activity, the
sort key, the playback scrubber and the importer. Everything that changes
state arrives as a message and is applied by update(), one at a time, on the
asyncio event loop:

  ParseFileResult  a background parse finished (posted by the parse task)
  Tick             the periodic playback clock (posted every 1/tick_hz s)
  KeyPress         user input

Background parse tasks never touch state; they only post their result.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Set, Union

from fitactivities.app.importer import Importer, ImportFailure, ParseFileResult, ParseRequest
from fitactivities.app.playback import BOOST_RECORDS, PlaybackScrubber
from fitactivities.app.sorting import SortField, SortKey, next_sort_key, sort_activities
from fitactivities.config import Settings, get_settings
from fitactivities.fit.files import DiscoveryError, get_fit_file_paths
from fitactivities.models.activity import Activity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Tick:
    now: float


@dataclass(frozen=True)
class KeyPress:
    key: str


Message = Union[ParseFileResult, Tick, KeyPress]

# Manual record steps while paused
_STEP_KEYS = {
    "left": -1,
    "right": 1,
    "shift+left": -BOOST_RECORDS,
    "shift+right": BOOST_RECORDS,
}


class ActivitiesController:
    """Single-threaded state owner for the activity browser."""

    def __init__(
        self,
        import_path: str,
        importer: Optional[Importer] = None,
        scrubber: Optional[PlaybackScrubber] = None,
        settings: Optional[Settings] = None,
        discover: Callable[[str], List[str]] = get_fit_file_paths,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            import_path: glob/directory/file the activities come from; used
                again on reload.
            importer: Importer instance (defaults to one that parses FIT files).
            scrubber: PlaybackScrubber (defaults to one built from settings).
            settings: Settings (defaults to get_settings()).
            discover: import path → FIT file paths.
            clock: monotonic seconds; injected in tests.
        """
        self.settings = settings or get_settings()
        self.import_path = import_path
        self.importer = importer or Importer()
        self.scrubber = scrubber or PlaybackScrubber(
            speed=self.settings.playback_speed,
            speed_boost=self.settings.speed_boost,
        )
        self.sort_key = SortKey.TIME_DESC
        self.activities: List[Activity] = []
        self.selected = 0
        self.quit = False
        self._discover = discover
        self._clock = clock
        self._queue: Optional[asyncio.Queue] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def selected_activity(self) -> Optional[Activity]:
        if not self.activities:
            return None
        return self.activities[self.selected]

    # ─── State transitions ────────────────────────────────────────────────────

    def start(self, paths: List[str]) -> Optional[ParseRequest]:
        request = self.importer.start(paths)
        self.selected = 0
        self._resort(keep=None)
        return request

    def reload(self) -> Optional[ParseRequest]:
        """Rediscover the import path and import everything again."""
        self.scrubber.stop(self._clock())
        request: Optional[ParseRequest] = None
        try:
            request = self.importer.reload(self._discover(self.import_path))
        except DiscoveryError as exc:
            logger.error("Reload failed: %s", exc)
            self.importer.reload([])
            self.importer.errors.append(ImportFailure(self.import_path, exc))
        self.selected = 0
        self._resort(keep=None)
        return request

    def update(self, msg: Message) -> Optional[ParseRequest]:
        """
        Apply one message.

        Returns:
            A ParseRequest to run next, if the message led to one.
        """
        keep = self.selected_activity
        request: Optional[ParseRequest] = None

        if isinstance(msg, ParseFileResult):
            request = self.importer.apply(msg)
        elif isinstance(msg, Tick):
            self._on_tick(msg.now)
        elif isinstance(msg, KeyPress):
            request = self.handle_key(msg.key)
        else:
            raise TypeError(f"Unknown message: {msg!r}")

        self._resort(keep=keep)
        return request

    def handle_key(self, key: str) -> Optional[ParseRequest]:
        if key == "q":
            self.quit = True
            return None
        if key == "r":
            return self.reload()
        if key == "t":
            self.sort_key = next_sort_key(self.sort_key, SortField.TIME)
            return None
        if key == "d":
            self.sort_key = next_sort_key(self.sort_key, SortField.DISTANCE)
            return None
        if key in ("up", "down"):
            self._select_step(-1 if key == "up" else 1)
            return None

        activity = self.selected_activity
        if activity is None or not activity.data.is_success():
            return None  # playback keys need a parsed activity

        if key == "space":
            self.scrubber.toggle(self._clock())
        elif key in _STEP_KEYS:
            self.scrubber.advance(activity, _STEP_KEYS[key])
        elif len(key) == 1 and key.isdigit():
            self.scrubber.set_speed_from_digit(key)
        elif key == "+":
            self.scrubber.speed_up()
        elif key == "-":
            self.scrubber.slow_down()
        elif key == "b":
            self.scrubber.boost()
        elif key == "home":
            self.scrubber.reset_index(activity)
        else:
            logger.debug("Unbound key %r", key)
        return None

    def select(self, activity: Activity) -> None:
        """Make `activity` the selected one, with playback stopped at record 0."""
        for i, candidate in enumerate(self.activities):
            if candidate is activity:
                self.selected = i
                self.scrubber.stop(self._clock())
                self.scrubber.reset_index(activity)
                return
        raise ValueError(f"Activity not in list: {activity.path}")

    def _select_step(self, step: int) -> None:
        if not self.activities:
            return
        # wraps around at both ends
        self.selected = (self.selected + step) % len(self.activities)
        self.scrubber.stop(self._clock())
        self.scrubber.reset_index(self.activities[self.selected])

    def _on_tick(self, now: float) -> None:
        activity = self.selected_activity
        if activity is not None and activity.data.is_success():
            self.scrubber.tick(activity, now)

    def _resort(self, keep: Optional[Activity]) -> None:
        self.activities = sort_activities(self.importer.activities, self.sort_key)
        if keep is not None:
            for i, activity in enumerate(self.activities):
                if activity is keep:
                    self.selected = i
                    return
        if not self.activities:
            self.selected = 0
        else:
            self.selected = min(self.selected, len(self.activities) - 1)

    # ─── Event loop ───────────────────────────────────────────────────────────

    async def run(
        self,
        until: Callable[["ActivitiesController"], bool],
        paths: Optional[List[str]] = None,
        on_update: Optional[Callable[["ActivitiesController", Message], None]] = None,
    ) -> None:
        """
        Process messages until `until(self)` is true or quit was requested.

        Args:
            until: stop condition, checked before every message.
            paths: if given, start a fresh import of these files first.
            on_update: called after each applied message (e.g. to print).
        """
        if self._queue is None:
            self._queue = asyncio.Queue()
        if paths is not None:
            self._schedule(self.start(paths))

        ticker = asyncio.create_task(self._tick_forever())
        try:
            while not self.quit and not until(self):
                msg = await self._queue.get()
                self._schedule(self.update(msg))
                if on_update is not None:
                    on_update(self, msg)
        finally:
            ticker.cancel()

    def _schedule(self, request: Optional[ParseRequest]) -> None:
        if request is None:
            return
        task = asyncio.create_task(self._parse(request))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _parse(self, request: ParseRequest) -> None:
        result = await self.importer.execute(request)
        self._queue.put_nowait(result)

    async def _tick_forever(self) -> None:
        interval = 1.0 / self.settings.tick_hz
        while True:
            await asyncio.sleep(interval)
            self._queue.put_nowait(Tick(self._clock()))
