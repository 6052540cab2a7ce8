"""
Session manager for simulation runs.

Each session wraps a SimulationEngine + MetricsCollector and supports
step-by-step execution, background runs that can be stopped between
ticks, and resets back to a fresh world from the same seed. Sessions
live in memory for the lifetime of the process.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Any

from segnet.core.config import SimulationConfig
from segnet.core.engine import SimulationEngine, SimulationState, TickSnapshot
from segnet.metrics.collector import MetricsCollector

logger = logging.getLogger(__name__)


@dataclass
class SimulationSession:
    """A running or finished simulation session."""

    id: str
    name: str
    config: SimulationConfig
    engine: SimulationEngine
    collector: MetricsCollector
    status: str = "created"  # created | running | converged | stopped | completed | error
    max_ticks: int | None = None

    @property
    def ticks(self) -> int:
        return self.engine.ticks

    def summary(self) -> dict[str, Any]:
        latest = self.engine.latest
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status,
            "state": self.engine.state.value,
            "ticks": self.engine.ticks,
            "max_ticks": self.max_ticks,
            "agent_count": len(self.engine.agents),
            "percent_unhappy": round(latest.percent_unhappy, 4) if latest else 0.0,
        }


class SessionManager:
    """Manages multiple in-memory simulation sessions."""

    def __init__(self) -> None:
        self.sessions: dict[str, SimulationSession] = {}
        # Session IDs currently running in background threads
        self._running: set[str] = set()
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def create_session(
        self,
        config: SimulationConfig | None = None,
        name: str | None = None,
    ) -> SimulationSession:
        """Create a new session with a freshly set-up world."""
        if config is None:
            config = SimulationConfig()

        session_id = uuid.uuid4().hex[:8]
        engine = SimulationEngine(config)
        collector = MetricsCollector(config)
        initial = engine.setup()
        collector.collect(engine.agents, initial)

        session = SimulationSession(
            id=session_id,
            name=name or config.experiment_name,
            config=config,
            engine=engine,
            collector=collector,
            max_ticks=config.max_ticks or None,
        )
        self.sessions[session_id] = session
        return session

    def get_session(self, session_id: str) -> SimulationSession:
        """Get a session by ID. Raises KeyError if not found."""
        if session_id not in self.sessions:
            raise KeyError(f"Session '{session_id}' not found")
        return self.sessions[session_id]

    def list_sessions(self) -> list[dict[str, Any]]:
        return [s.summary() for s in self.sessions.values()]

    def delete_session(self, session_id: str) -> None:
        session = self.get_session(session_id)
        session.engine.request_stop()
        del self.sessions[session_id]

    def is_running(self, session_id: str) -> bool:
        return session_id in self._running

    def step(self, session_id: str, n: int = 1) -> SimulationSession:
        """Advance a session by up to N ticks."""
        session = self.get_session(session_id)

        with self._lock:
            if session_id in self._running:
                return session  # Background run in progress, don't interfere
            if session.status in ("converged", "completed"):
                return session
            # Claim the engine so a concurrent run cannot start mid-step
            self._running.add(session_id)

        budget = n
        remaining = self._remaining(session)
        if remaining is not None:
            budget = min(budget, remaining)

        try:
            session.status = "running"
            if budget > 0:
                session.engine.run(
                    max_ticks=budget,
                    on_tick=lambda s: session.collector.collect(session.engine.agents, s),
                )
        finally:
            with self._lock:
                self._running.discard(session_id)

        self._settle_status(session, default="running")
        return session

    def run_full_async(
        self, session_id: str, ticks: int | None = None,
    ) -> SimulationSession:
        """Start running a session in a background thread.

        Runs until convergence, the session tick cap, ``ticks`` more ticks
        (if given), or a stop request.
        """
        session = self.get_session(session_id)
        with self._lock:
            if session_id in self._running:
                return session  # Already running, no-op
            if session.status in ("converged", "completed"):
                return session
            self._running.add(session_id)

        session.status = "running"
        budget = self._remaining(session)
        if ticks is not None:
            budget = ticks if budget is None else min(budget, ticks)

        def _collect(snapshot: TickSnapshot) -> None:
            session.collector.collect(session.engine.agents, snapshot)

        def _worker():
            failed = False
            try:
                if budget is None or budget > 0:
                    session.engine.run(max_ticks=budget or 0, on_tick=_collect)
            except Exception:
                logger.exception("Background run failed for %s", session_id)
                failed = True
            finally:
                with self._lock:
                    self._running.discard(session_id)
            # Status changes only after the session can accept a new run
            if failed:
                session.status = "error"
            else:
                self._settle_status(session, default="stopped")

        t = threading.Thread(target=_worker, daemon=True)
        t.start()
        return session

    def run_full(self, session_id: str) -> SimulationSession:
        """Run a session synchronously until it converges or hits its cap."""
        session = self.get_session(session_id)
        remaining = self._remaining(session)
        if remaining is None or remaining > 0:
            session.status = "running"
            session.engine.run(
                max_ticks=remaining or 0,
                on_tick=lambda s: session.collector.collect(session.engine.agents, s),
            )
        self._settle_status(session, default="stopped")
        return session

    def stop(self, session_id: str) -> SimulationSession:
        """Signal a background run to stop before its next tick."""
        session = self.get_session(session_id)
        if session_id in self._running:
            session.engine.request_stop()
        return session

    def reset_session(self, session_id: str) -> SimulationSession:
        """Rebuild the world from the session config (same seed, same start)."""
        session = self.get_session(session_id)
        session.collector = MetricsCollector(session.config)
        initial = session.engine.setup()
        session.collector.collect(session.engine.agents, initial)
        session.status = "created"
        return session

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _remaining(session: SimulationSession) -> int | None:
        if session.max_ticks is None:
            return None
        return max(session.max_ticks - session.engine.ticks, 0)

    def _at_cap(self, session: SimulationSession) -> bool:
        return session.max_ticks is not None and session.engine.ticks >= session.max_ticks

    def _settle_status(self, session: SimulationSession, default: str) -> None:
        if session.engine.state == SimulationState.CONVERGED:
            session.status = "converged"
        elif self._at_cap(session):
            session.status = "completed"
        else:
            session.status = default
