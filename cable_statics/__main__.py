import argparse
import logging
import sys
from typing import Optional, Sequence

from cable_statics import (
    DiagramConfig,
    DiagramSession,
    JsonFileStorage,
    MemoryStorage,
    Point,
    UrlLocation,
    format_labels,
    format_report,
)
from cable_statics.state import POINT_NAMES

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _location_url(url: Optional[str], query: Optional[str]) -> str:
    if url:
        return url
    if query:
        return "?" + query.lstrip("?")
    return ""


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Solve a two-cable statics diagram")
    parser.add_argument(
        "--url",
        help="Page URL whose query string carries the diagram state",
    )
    parser.add_argument(
        "--query",
        help="Query string carrying the diagram state (used when --url is absent)",
    )
    parser.add_argument(
        "--state-file",
        help="JSON file used as the storage blob (default: in-memory)",
    )
    parser.add_argument("--width", type=float, default=500.0, help="Canvas width (default: 500)")
    parser.add_argument("--height", type=float, default=400.0, help="Canvas height (default: 400)")
    parser.add_argument(
        "--move",
        nargs=3,
        action="append",
        metavar=("NAME", "X", "Y"),
        default=[],
        help="Move a point (P0..P3) to world coordinates X Y; may be repeated",
    )
    parser.add_argument("--force-magnitude", help="New force magnitude in N")
    parser.add_argument("--force-direction", help="New force direction in degrees")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Restore defaults, clear storage and strip the URL state",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    storage = JsonFileStorage(args.state_file) if args.state_file else MemoryStorage()
    location = UrlLocation(_location_url(args.url, args.query))
    config = DiagramConfig(canvas_width=args.width, canvas_height=args.height)
    session = DiagramSession(storage, location, config)
    logger.info("Initial state taken from %s", session.source.value)

    if args.reset:
        session.reset()

    for name, raw_x, raw_y in args.move:
        name = name.upper()
        if name not in POINT_NAMES:
            parser.error(f"unknown point {name!r}; expected one of {', '.join(POINT_NAMES)}")
        try:
            position = Point(float(raw_x), float(raw_y))
        except ValueError:
            parser.error(f"--move {name} needs numeric coordinates, got {raw_x!r} {raw_y!r}")
        session.move_point(name, position)

    if args.force_magnitude is not None:
        session.set_force_magnitude(args.force_magnitude)
    if args.force_direction is not None:
        session.set_force_direction(args.force_direction)

    frame = session.update()

    print(f"State source: {session.source.value}")
    for line in format_report(frame.state, frame.result):
        print(line)
    print("Labels:")
    for line in format_labels(frame.labels, list(POINT_NAMES)):
        print(f"  {line}")
    print(f"URL: {location.url}")


if __name__ == "__main__":
    main(sys.argv[1:])
