"""Mars Flight — command-line flight. Plays the six-round scenario in the terminal."""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from mars_flight.catalog import Catalog
from mars_flight.config import data_dir_from_env, load_config
from mars_flight.errors import FlightError
from mars_flight.service import FlightService
from mars_flight.storage import Storage

ROOT = Path(__file__).parent
load_dotenv(ROOT / ".env")


def _parse_inputs(text: str) -> list[float]:
    try:
        return [float(part) for part in text.split(",") if part.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"Fuel inputs must be comma-separated numbers: {text!r}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Mars Flight round simulator")
    parser.add_argument("--data-dir", type=Path, default=None,
                        help="Session storage directory (default: $MARS_FLIGHT_DATA_DIR or ./data)")
    parser.add_argument("--config", type=Path, default=None,
                        help="JSON file with engine constant overrides")
    parser.add_argument("--rocket", type=int, default=1,
                        help="Rocket id from presets/rockets.json (default: 1)")
    parser.add_argument("--inputs", type=_parse_inputs, default=None,
                        help="Fuel input per round, e.g. 80,20,80,20,80,20")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        storage = Storage(args.data_dir or data_dir_from_env(ROOT / "data"))
        service = FlightService(storage, Catalog(), config)
        inputs = args.inputs or [50.0] * config.total_rounds

        service.reset()
        session = service.start_flight(args.rocket)
        print(f"Flight {session.id} launched with rocket {args.rocket}.")
        for fuel_input in inputs:
            news = service.news()
            print(f"\n== Round {news['current_round']}/{news['total_rounds']} ==")
            for item in news["events"]:
                print(f"  [news] {item['news']}")
                print(f"  [nav ] {item['navigator']}")
            service.begin_round()
            result = service.end_round(fuel_input)
            verdict = "correct" if result.choice.is_correct_choice else "wrong"
            print(f"  fuel {fuel_input:g} → thrust x{result.total_thrust_multiplier:.2f}, "
                  f"{'favourable' if result.overall_positive else 'unfavourable'} round, {verdict}")
            for event in result.events:
                if event.result.description:
                    print(f"  [real] {event.result.description}")
            if result.is_game_over:
                print(f"  {result.game_over_reason}")
                break
        else:
            print("\nOut of fuel inputs before the flight ended.")
            return 1

        report = service.final_report()
        ending = report["final_ending"]
        print(f"\n{report['correct_answers']}/{report['total_rounds']} correct "
              f"({report['accuracy']}%). Ending: {ending.title} - {ending.description}")
    except FlightError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
