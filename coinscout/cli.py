#!/usr/bin/env python3
"""Command-line entry point for the coinscout chatbot"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .config import ConfigurationError, Settings, load_settings
from .core.bootstrap import initialize_agent
from .core.chat import ConversationLoop, choose_mode
from .logging_config import setup_logging

logger = logging.getLogger("coinscout.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Crypto investment chatbot")
    parser.add_argument("--mode", choices=["chat", "auto"], help="Skip the mode prompt")
    parser.add_argument("--interval", type=float, help="Seconds between autonomous cycles")
    parser.add_argument("--log-level", help="Override LOG_LEVEL")
    return parser


def report_missing(error: ConfigurationError) -> None:
    print("Error: Required environment variables are not set", file=sys.stderr)
    for name in error.missing:
        print(f"{name}=your_{name.lower()}_here", file=sys.stderr)


async def run(settings: Settings, mode: Optional[str] = None, interval: Optional[float] = None) -> None:
    context = await initialize_agent(settings)
    mode = mode or await asyncio.to_thread(choose_mode)

    loop = ConversationLoop(context.runtime, session_id=settings.session_id)
    if mode == "chat":
        await loop.run_chat_mode()
    else:
        await loop.run_autonomous_mode(interval or settings.autonomous_interval_seconds)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings()
    setup_logging(args.log_level or settings.log_level)

    try:
        warnings = settings.validate_environment()
    except ConfigurationError as exc:
        report_missing(exc)
        return 1

    for warning in warnings:
        print(f"Warning: {warning}", file=sys.stderr)

    print("Starting Agent...")
    try:
        asyncio.run(run(settings, args.mode, args.interval))
    except KeyboardInterrupt:
        print("\nGoodbye! 👋")
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
