"""Quick check: are the places and advice providers reachable with the configured keys?"""
import asyncio
import logging
import sys

from dotenv import load_dotenv

from assistant.advisor import RemoteAdvisor
from assistant.config import AssistantConfig
from assistant.conversation import outcome_text
from assistant.models import Coordinate
from assistant.places import PlaceSearchEngine

load_dotenv()

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(name)s — %(message)s")


async def main(lat: float, lon: float) -> None:
    config = AssistantConfig.from_env()
    print(f"GEOAPIFY_KEY:   {'set' if config.places_enabled else 'MISSING'}")
    print(f"OPENROUTER_KEY: {'set' if config.advice_enabled else 'MISSING'}")
    print()
    print("=" * 70)
    print(f"  Nearest hospital to ({lat}, {lon})")
    print("=" * 70)

    engine = PlaceSearchEngine.from_config(config)
    outcome = await engine.search(
        "healthcare.hospital", Coordinate(lat, lon), on_notice=lambda text: print(f"  .. {text}"),
    )
    print(outcome_text(outcome, "healthcare.hospital"))

    print()
    print("=" * 70)
    print("  Advice: Is it safe to walk alone at night?")
    print("=" * 70)
    print(await RemoteAdvisor.from_config(config).get_advice("Is it safe to walk alone at night?"))


if __name__ == "__main__":
    coords = [float(v) for v in sys.argv[1:3]] if len(sys.argv) > 2 else [43.6532, -79.3832]
    asyncio.run(main(*coords))
