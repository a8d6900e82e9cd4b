import abc
import copy
import logging
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class StoreUnavailableError(Exception):
    """Raised when the score store backend cannot be reached or fails an operation."""
    pass


class ScoreStore(abc.ABC):
    """
    Persistent key-value store for scored quiz attempts, keyed by
    (attempt_id, record_type). Values are JSON-compatible.
    """

    @abc.abstractmethod
    async def get(self, attempt_id: str, record_type: str) -> Optional[Any]:
        """Returns the stored value, or None when no record exists."""

    @abc.abstractmethod
    async def insert_if_absent(self, attempt_id: str, record_type: str, value: Any) -> Any:
        """
        Atomically creates the record unless one already exists.
        Returns whatever the store holds afterwards: the new value when this
        call created it, otherwise the existing value. Never overwrites.
        """

    @abc.abstractmethod
    async def delete(self, attempt_id: str, record_type: str) -> bool:
        """Removes the record. Returns True if one existed."""

    async def close(self) -> None:
        return None


class InMemoryScoreStore(ScoreStore):
    """Process-local store. Suitable for tests and single-process deployments."""

    def __init__(self):
        self._records: Dict[Tuple[str, str], Any] = {}

    async def get(self, attempt_id: str, record_type: str) -> Optional[Any]:
        value = self._records.get((attempt_id, record_type))
        return copy.deepcopy(value) if value is not None else None

    async def insert_if_absent(self, attempt_id: str, record_type: str, value: Any) -> Any:
        key = (attempt_id, record_type)
        if key not in self._records:
            self._records[key] = copy.deepcopy(value)
            logger.debug(f"Stored {record_type} for attempt {attempt_id}")
        return copy.deepcopy(self._records[key])

    async def delete(self, attempt_id: str, record_type: str) -> bool:
        return self._records.pop((attempt_id, record_type), None) is not None

    def count(self, attempt_id: Optional[str] = None) -> int:
        if attempt_id is None:
            return len(self._records)
        return sum(1 for stored_attempt, _ in self._records if stored_attempt == attempt_id)
