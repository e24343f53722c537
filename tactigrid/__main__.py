"""Entry point for ``python -m tactigrid``.

Loads a generator config, builds a map and prints it as text.  With
``--unit`` a unit is placed on the map and the tiles it can reach are
marked.
"""

from __future__ import annotations

import argparse
import logging
import pathlib
import sys
from dataclasses import replace

import structlog

from tactigrid.mapgen.config import GeneratorConfig
from tactigrid.mapgen.generator import generate
from tactigrid.movement.controller import UnitController
from tactigrid.world.unit import DEFAULT_MOVE_POINTS, Unit

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)

_UNIT_GLYPH = "@"
_REACHABLE_GLYPH = "*"


def configure_logging(level: str) -> None:
    """Route structlog through the stdlib logger at ``level``."""
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def _parse_position(text: str) -> tuple[int, int]:
    try:
        x, y = (int(part) for part in text.split(","))
    except ValueError as exc:
        msg = f"expected X,Y but got {text!r}"
        raise argparse.ArgumentTypeError(msg) from exc
    return (x, y)


def build_parser() -> argparse.ArgumentParser:
    """Command line interface definition."""
    parser = argparse.ArgumentParser(
        prog="tactigrid",
        description="Tactigrid - tactical terrain generator",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML generator config (default: config/default.yaml)",
    )
    parser.add_argument("--seed", type=int, help="Override the config seed")
    parser.add_argument("--width", type=int, help="Override the map width")
    parser.add_argument("--height", type=int, help="Override the map height")
    parser.add_argument(
        "--unit",
        type=_parse_position,
        metavar="X,Y",
        help="Place a unit and mark its reachable tiles",
    )
    parser.add_argument(
        "--move-points",
        type=int,
        default=DEFAULT_MOVE_POINTS,
        help=f"Move points of the unit (default: {DEFAULT_MOVE_POINTS})",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging threshold (default: WARNING)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI args, generate the map, print it."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    config = GeneratorConfig.from_yaml(args.config)
    overrides = {
        name: value
        for name, value in (
            ("seed", args.seed),
            ("width", args.width),
            ("height", args.height),
        )
        if value is not None
    }
    config = replace(config, **overrides)
    grid = generate(config)

    overlay: dict[tuple[int, int], str] = {}
    if args.unit is not None:
        controller = UnitController()
        unit = Unit(position=args.unit, move_points=args.move_points)
        controller.set_units(grid, [unit])
        controller.select(grid, 0)
        if controller.reachability is not None:
            for position in controller.reachability.reachable_positions():
                overlay[position] = _REACHABLE_GLYPH
        overlay[controller.units[0].position] = _UNIT_GLYPH

    print(grid.render_ascii(overlay))


if __name__ == "__main__":
    main()
