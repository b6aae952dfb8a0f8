"""JSON file storage for flight sessions.

The engine itself never touches storage; this is the reference persistence adapter
the flight service and the CLI run on. All state is stored in flat JSON files
under a configurable base directory.

Directory layout:

    {base}/
      sessions/
        {id}.json        ← FlightSession
        {id}/
          log.json       ← append-only list of FlightLogEntry objects

Writes are guarded by an optimistic version check: save_session() only succeeds
when the stored version still equals the version the caller read, which keeps
at most one resolution in flight per session.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from mars_flight.errors import ConflictError, NotFoundError
from mars_flight.models import FlightLogEntry, FlightSession

logger = logging.getLogger(__name__)


class Storage:
    def __init__(self, base_path: Path) -> None:
        self._base = base_path
        self._sessions_root = base_path / "sessions"
        self._sessions_root.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Internal path helpers
    # ------------------------------------------------------------------

    def _session_file(self, session_id: int) -> Path:
        return self._sessions_root / f"{session_id}.json"

    def _session_dir(self, session_id: int) -> Path:
        return self._sessions_root / str(session_id)

    def _read_json(self, path: Path) -> Any:
        return json.loads(path.read_text())

    def _write_json(self, path: Path, data: Any) -> None:
        path.write_text(json.dumps(data, indent=2))

    def _all_sessions(self) -> list[FlightSession]:
        return [
            FlightSession.model_validate_json(path.read_text())
            for path in self._sessions_root.glob("*.json")
        ]

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def create_session(self, session: FlightSession) -> FlightSession:
        """Persist a new session under the next free id."""
        next_id = max((s.id for s in self._all_sessions()), default=0) + 1
        created = session.model_copy(update={"id": next_id, "version": 1})
        self._session_file(next_id).write_text(created.model_dump_json(indent=2))
        self._session_dir(next_id).mkdir(exist_ok=True)
        logger.info("Created flight %d for rocket %d", next_id, created.rocket_id)
        return created

    def get_session(self, session_id: int) -> FlightSession | None:
        path = self._session_file(session_id)
        if not path.exists():
            return None
        return FlightSession.model_validate_json(path.read_text())

    def require_session(self, session_id: int) -> FlightSession:
        session = self.get_session(session_id)
        if session is None:
            raise NotFoundError(f"Flight {session_id} not found")
        return session

    def find_active(self) -> FlightSession | None:
        active = [s for s in self._all_sessions() if s.status == "IN_PROGRESS"]
        return max(active, key=lambda s: s.id, default=None)

    def list_finished(self, limit: int = 5) -> list[FlightSession]:
        """Most recently updated finished sessions first."""
        finished = [s for s in self._all_sessions() if s.status != "IN_PROGRESS"]
        finished.sort(key=lambda s: (s.updated_at, s.id), reverse=True)
        return finished[:limit]

    def save_session(self, session: FlightSession) -> FlightSession:
        """Write back a session read earlier. Returns the saved copy.

        Raises ConflictError if someone else saved the session in the meantime.
        """
        stored = self.require_session(session.id)
        if stored.version != session.version:
            logger.warning(
                "Stale write to flight %d: stored version %d, got %d",
                session.id, stored.version, session.version,
            )
            raise ConflictError(
                f"Flight {session.id} was modified concurrently "
                f"(version {stored.version}, expected {session.version})"
            )
        saved = session.model_copy(update={"version": session.version + 1})
        self._session_file(session.id).write_text(saved.model_dump_json(indent=2))
        return saved

    # ------------------------------------------------------------------
    # Flight log (append-only)
    # ------------------------------------------------------------------

    def get_log(self, session_id: int) -> list[FlightLogEntry]:
        path = self._session_dir(session_id) / "log.json"
        if not path.exists():
            return []
        return [FlightLogEntry.model_validate(e) for e in self._read_json(path)]

    def append_log(self, session_id: int, entries: list[FlightLogEntry]) -> None:
        existing = self.get_log(session_id)
        existing.extend(entries)
        self._session_dir(session_id).mkdir(exist_ok=True)
        self._write_json(
            self._session_dir(session_id) / "log.json",
            [e.model_dump() for e in existing],
        )
