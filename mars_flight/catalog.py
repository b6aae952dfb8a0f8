"""Scenario catalog — rocket profiles and the per-round event set.

Read-only data loaded from a presets directory:

    presets/
      rockets.json   ← list of RocketProfile objects
      events.json    ← list of EventDefinition objects (six-round scenario)

Events for a round are the global events first, then the events aimed at the
resolving rocket. Briefings hide whether an event is a twist.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from mars_flight.errors import NotFoundError
from mars_flight.models import EventDefinition, RocketProfile

logger = logging.getLogger(__name__)

DEFAULT_PRESETS_DIR = Path(__file__).parent.parent / "presets"


class Catalog:
    def __init__(self, presets_dir: Path = DEFAULT_PRESETS_DIR) -> None:
        self._dir = presets_dir
        self._rockets = {
            r.id: r for r in (RocketProfile.model_validate(d) for d in self._load("rockets.json"))
        }
        self._events = [EventDefinition.model_validate(d) for d in self._load("events.json")]
        logger.debug("catalog loaded dir=%s rockets=%d events=%d",
                     presets_dir, len(self._rockets), len(self._events))

    def _load(self, name: str) -> list[dict]:
        path = self._dir / name
        if not path.is_file():
            return []
        return json.loads(path.read_text())

    def list_rockets(self) -> list[RocketProfile]:
        return sorted(self._rockets.values(), key=lambda r: r.id)

    def get_rocket(self, rocket_id: int) -> RocketProfile:
        rocket = self._rockets.get(rocket_id)
        if rocket is None:
            raise NotFoundError(f"Rocket {rocket_id} not found")
        return rocket

    def events_for_round(self, round_number: int, rocket_id: int) -> list[EventDefinition]:
        events = [
            e for e in self._events
            if e.round == round_number and (e.is_global or e.target_rocket_id == rocket_id)
        ]
        if not events:
            raise NotFoundError(f"No events for round {round_number}")
        return sorted(events, key=lambda e: not e.is_global)


def briefing(event: EventDefinition) -> dict:
    """The three news items shown before a round. Twist fields are left out."""
    return {
        "id": event.id,
        "round": event.round,
        "is_global": event.is_global,
        "news": event.headline,
        "navigator": event.navigator_note,
        "log": event.log_note,
    }
