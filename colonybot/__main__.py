"""Entry point: ``python -m colonybot``.

Supports two modes:
  - ``python -m colonybot``            → Launch the FastAPI server with a live colony
  - ``python -m colonybot cli``        → Headless run that writes a replay file
"""

from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Tick-driven colony extraction engine")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=42)
    srv.add_argument("--nodes", type=int, default=4)
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run a headless colony")
    cli.add_argument("--seed", type=int, default=42)
    cli.add_argument("--ticks", type=int, default=1500)
    cli.add_argument("--nodes", type=int, default=4)
    cli.add_argument("--replay", type=str, default="replay.json")
    cli.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from colonybot.api.app import create_app
    from colonybot.config import ColonyConfig

    config = ColonyConfig(
        world_seed=args.seed,
        num_nodes=args.nodes,
        log_level=args.log_level,
    )
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _run_cli(args: argparse.Namespace) -> None:
    from colonybot.config import ColonyConfig
    from colonybot.engine.colony_loop import ColonyLoop
    from colonybot.systems.generator import build_world
    from colonybot.utils.logging import setup_logging
    from colonybot.utils.replay import ReplayRecorder

    config = ColonyConfig(
        world_seed=args.seed,
        max_ticks=args.ticks,
        num_nodes=args.nodes,
        replay_file=args.replay,
        log_level=args.log_level,
    )

    setup_logging(config.log_level)

    world, colony = build_world(config)
    recorder = ReplayRecorder(config.replay_file, config.world_seed)
    loop = ColonyLoop(config, world, colony, recorder=recorder)
    loop.run()

    logger.info("Done. Replay written to %s", config.replay_file)


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "cli":
        _run_cli(args)


if __name__ == "__main__":
    main()
