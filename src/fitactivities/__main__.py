"""
Main entrypoint: imports FIT activity files and prints their summaries, or
replays one activity record by record.

Usage:
    python -m fitactivities [PATH]          # import + sorted summary
    python -m fitactivities import [PATH]   # same as above
    python -m fitactivities play [PATH]     # import, then replay the newest activity

PATH is a directory, a single .fit file or a quoted glob pattern
("rides/2025-11*.fit"). Defaults to FIT_IMPORT_PATH, then the current
directory. Playback speed comes from FIT_PLAYBACK_SPEED (1-10).
"""
import asyncio
import logging
import os
import sys
from typing import List, Optional, Tuple

from fitactivities.config import Settings, get_settings

logger = logging.getLogger(__name__)

_COMMANDS = ("import", "play")


def _configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        filename=settings.log_file,
    )


def _parse_argv(argv: List[str]) -> Tuple[str, Optional[str]]:
    """Split argv into (command, path). Command defaults to "import"."""
    args = list(argv)
    command = "import"
    if args and args[0] in _COMMANDS:
        command = args.pop(0)
    return command, (args[0] if args else None)


def _print_summary(controller) -> None:
    from fitactivities.app.report import activity_line, progress_line

    print(progress_line(controller.importer))
    for activity in controller.activities:
        print(activity_line(activity))
    for failure in controller.importer.errors:
        print(f"error: {failure}")


async def _run_import(controller, paths: List[str]) -> None:
    await controller.run(until=lambda c: not c.importer.parsing(), paths=paths)
    _print_summary(controller)


async def _run_play(controller, paths: List[str]) -> None:
    from fitactivities.app.report import activity_details, record_line

    await controller.run(until=lambda c: not c.importer.parsing(), paths=paths)

    activity = next((a for a in controller.activities if a.data.is_success()), None)
    if activity is None:
        _print_summary(controller)
        logger.error("No activity could be parsed, nothing to play.")
        return

    data = activity.activity_data
    print(activity.path)
    for line in activity_details(data):
        print(line)

    controller.select(activity)
    print(record_line(data.records[0], 0, data.no_records))

    last_index = 0

    def on_update(c, _msg) -> None:
        nonlocal last_index
        index = activity.record_index
        if index != last_index:
            last_index = index
            print(record_line(data.records[index], index, data.no_records))

    controller.handle_key("space")
    await controller.run(until=lambda c: not c.scrubber.playing, on_update=on_update)


def main(argv: Optional[List[str]] = None) -> int:
    from fitactivities.app.controller import ActivitiesController
    from fitactivities.fit.files import DiscoveryError, get_fit_file_paths

    settings = get_settings()
    _configure_logging(settings)

    command, path = _parse_argv(sys.argv[1:] if argv is None else argv)
    path = path or settings.import_path or os.getcwd()

    try:
        paths = get_fit_file_paths(path)
    except DiscoveryError as exc:
        logger.error("%s", exc)
        return 1

    controller = ActivitiesController(import_path=path, settings=settings)
    try:
        if command == "play":
            asyncio.run(_run_play(controller, paths))
        else:
            asyncio.run(_run_import(controller, paths))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
