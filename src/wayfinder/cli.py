"""
CLI entry point.

Commands:
- serve: Start the HTTP API
- init: Initialize data directory
- memory: Print stored world memory as JSON
- think: Resolve one transcript and print the action

Flags:
- --debug: Enable debug logging
"""

import asyncio
import json
import logging
import sys

from wayfinder.core.config import Settings, get_settings
from wayfinder.core.errors import UpstreamError
from wayfinder.core.logging import get_logger, setup_logging
from wayfinder.core.types import DEFAULT_PORTAL

USAGE = """Usage: wayfinder [--debug] <command>
Commands: serve, init, memory, think
  think [--portal NAME] [--mesh NAME] <transcript...>
Flags: --debug (enable debug logging to data/wayfinder.log)"""


def main() -> int:
    """Main entry point."""
    settings = get_settings()
    args = sys.argv[1:]

    debug_mode = "--debug" in args
    if debug_mode:
        args.remove("--debug")

    log_level = logging.DEBUG if debug_mode else settings.log_level
    log_file = settings.data_dir / "wayfinder.log"
    setup_logging(level=log_level, log_file=log_file)
    logger = get_logger("cli")

    if not args:
        print(USAGE)
        return 1

    command, rest = args[0], args[1:]

    if command == "init":
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Initialized data directory: {settings.data_dir}")
        print(f"Created: {settings.data_dir}")
        return 0

    if command == "serve":
        from wayfinder.interfaces.http import serve

        logger.info(f"Starting HTTP API on {settings.host}:{settings.port}")
        serve(settings)
        return 0

    if command == "memory":
        store = _load_store(settings)
        print(json.dumps(store.snapshot(), indent=2))
        return 0

    if command == "think":
        return asyncio.run(_think(settings, rest))

    print(f"Unknown command: {command}")
    return 1


def _load_store(settings: Settings):
    from wayfinder.memory.store import WorldMemoryStore

    store = WorldMemoryStore(settings.memory_path, settings.persistence_enabled)
    store.load()
    return store


def _parse_think_args(args: list[str]) -> tuple[str, str | None, str]:
    """Split think arguments into (portal, mesh, transcript)."""
    portal, mesh = DEFAULT_PORTAL, None
    words: list[str] = []
    i = 0
    while i < len(args):
        if args[i] in ("--portal", "--mesh") and i + 1 < len(args):
            if args[i] == "--portal":
                portal = args[i + 1]
            else:
                mesh = args[i + 1]
            i += 2
            continue
        words.append(args[i])
        i += 1
    return portal, mesh, " ".join(words)


async def _think(settings: Settings, args: list[str]) -> int:
    """Resolve a single transcript from the command line."""
    from wayfinder.intent.resolver import create_resolver
    from wayfinder.llm.fallback import create_fallback

    logger = get_logger("cli.think")
    portal, mesh, transcript = _parse_think_args(args)
    if not transcript.strip():
        print(USAGE)
        return 1

    store = _load_store(settings)
    resolver = create_resolver(settings, store, fallback=create_fallback(settings))

    try:
        result = await resolver.resolve(transcript, current_portal=portal, current_mesh=mesh)
    except UpstreamError as e:
        logger.error(f"Reasoning failed: {e}")
        print(json.dumps({"error": e.message}))
        return 1

    print(json.dumps(result.to_dict()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
