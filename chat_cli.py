"""Terminal chat with the SafeHer assistant.

Run from project root:
  python chat_cli.py --lat 43.6532 --lon -79.3832
  python chat_cli.py --near "Union Station, Toronto" --mode advice

Commands inside the chat:  /mode emergency | /mode advice | /quit
"""

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

from assistant.config import AssistantConfig
from assistant.conversation import build_orchestrator
from assistant.location import acquire_location, geocoded_location, static_location
from assistant.models import Mode

load_dotenv()


def _parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Chat with the SafeHer safety assistant")
    where = parser.add_mutually_exclusive_group()
    where.add_argument("--near", help="place name to geocode as your location")
    where.add_argument("--lat", type=float, help="your latitude (use with --lon)")
    parser.add_argument("--lon", type=float, help="your longitude (use with --lat)")
    parser.add_argument("--mode", choices=[m.value for m in Mode], default=Mode.EMERGENCY.value)
    parser.add_argument("-v", "--verbose", action="store_true", help="show provider logs")
    args = parser.parse_args(argv)
    if (args.lat is None) != (args.lon is None):
        parser.error("--lat and --lon must be given together")
    return args


def _show(messages) -> None:
    for msg in messages:
        print(f"\nbot> {msg.text}")


async def main(argv=None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s: %(name)s — %(message)s",
    )

    config = AssistantConfig.from_env()
    provider = geocoded_location(args.near, url=config.geocode_url) if args.near \
        else static_location(args.lat, args.lon)
    location = await acquire_location(provider)

    convo = build_orchestrator(config, location=location, mode=Mode(args.mode))
    _show([convo.start()])

    while True:
        try:
            line = await asyncio.to_thread(input, "\nyou> ")
        except (EOFError, KeyboardInterrupt):
            print()
            return 0

        line = line.strip()
        if line in ("/quit", "/exit"):
            return 0
        if line.startswith("/mode"):
            _, _, value = line.partition(" ")
            try:
                _show([convo.switch_mode(value.strip())])
            except ValueError:
                print("Usage: /mode emergency|advice")
            continue

        _show(await convo.handle(line))


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
