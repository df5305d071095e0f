"""
Where analysed bets go when the caller asks for them to be logged.

Persistence itself lives outside this package.  The orchestrator only
depends on :class:`BetSink`; any object with a matching ``log_bet`` works.
A failing sink never fails the analysis, it just becomes an assumption
note on the report.
"""

import logging
import threading
import uuid
from typing import Dict, List, Optional, Protocol

from cover_edge.models import BetRecord, LoggedBet

logger = logging.getLogger(__name__)


class BetSink(Protocol):
    def log_bet(self, record: BetRecord) -> LoggedBet:
        """Store ``record`` and return its id.  May raise on failure."""
        ...


class InMemoryBetSink:
    """Thread-safe sink that keeps records in a dict (tests, paper trading)."""

    def __init__(self):
        self._records: Dict[str, BetRecord] = {}
        self._lock = threading.Lock()

    def log_bet(self, record: BetRecord) -> LoggedBet:
        bet_id = uuid.uuid4().hex
        with self._lock:
            self._records[bet_id] = record
        logger.info(
            "Logged bet %s: %s %+g vs %s, $%.2f",
            bet_id, record.pick, record.spread, record.opponent, record.recommended_stake,
        )
        return LoggedBet(bet_id=bet_id)

    def get(self, bet_id: str) -> Optional[BetRecord]:
        with self._lock:
            return self._records.get(bet_id)

    def records(self) -> List[BetRecord]:
        """Snapshot of everything logged so far, oldest first."""
        with self._lock:
            return list(self._records.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
