from __future__ import annotations

import argparse

from korotus.engine.game import GameConfig, initialize_game
from korotus.logging_utils import LOG_LEVEL, get_logger, setup_logging
from korotus.paths import get_paths
from korotus.services.schema import SchemaError, SchemaService
from korotus.services.telemetry import TelemetryService

from .session import Session

logger = get_logger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="korotus", description="Hot-seat Korotus in the terminal.")
    parser.add_argument("--seed", type=int, default=None, help="seed the shuffle for a reproducible deal")
    parser.add_argument("--hand-size", type=int, default=GameConfig.hand_size)
    parser.add_argument(
        "--cap-face-down",
        action="store_true",
        help="never refuse a face-up card for lack of follow-up cards",
    )
    parser.add_argument(
        "--telemetry",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="record game events to a JSON-lines file",
    )
    parser.add_argument("--log-level", default=LOG_LEVEL)
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    paths = get_paths()
    schemas = SchemaService(paths.schema_dir)
    try:
        schemas.validate_all()
    except SchemaError as e:
        parser.error(str(e))
    telemetry = TelemetryService(paths.userdata_dir / "telemetry.jsonl", enabled=args.telemetry)

    config = GameConfig(hand_size=args.hand_size, cap_face_down=args.cap_face_down)
    try:
        state = initialize_game(args.seed, config=config)
    except ValueError as e:
        parser.error(str(e))

    session = Session(state=state, telemetry=telemetry, schemas=schemas)
    print(session.start())
    while not session.finished:
        try:
            line = input("> ")
        except EOFError:
            break
        print(session.handle(line))
        if session.state.game_over:
            break

    session.close()
    logger.debug("Session closed after round %d", session.state.round)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
