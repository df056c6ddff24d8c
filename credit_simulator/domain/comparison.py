"""Session-scoped comparison basket for evaluated credit results"""

import threading
from datetime import datetime, timezone
from typing import Dict, List, Tuple
from credit_simulator.domain.models import ComparisonItem, CreditResult


class ComparisonBasket:
    """Ordered, de-duplicated selection of results for one session"""

    def __init__(self):
        self._items: List[ComparisonItem] = []
        self._lock = threading.Lock()

    @property
    def items(self) -> Tuple[ComparisonItem, ...]:
        with self._lock:
            return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, result_id: str) -> bool:
        return any(item.id == result_id for item in self.items)

    def add(self, result: CreditResult) -> bool:
        """Append the result unless its id is already present. Returns True if added."""
        with self._lock:
            if any(item.id == result.id for item in self._items):
                return False
            self._items.append(ComparisonItem(result=result, added_at=datetime.now(timezone.utc)))
            return True

    def remove(self, result_id: str) -> None:
        """Drop the matching item; unknown ids are ignored"""
        with self._lock:
            self._items = [item for item in self._items if item.id != result_id]

    def clear(self) -> None:
        with self._lock:
            self._items = []


class ComparisonStore:
    """Independent baskets keyed by session id"""

    def __init__(self):
        self._baskets: Dict[str, ComparisonBasket] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str) -> ComparisonBasket:
        """Return the session's basket, creating an empty one on first use"""
        with self._lock:
            return self._baskets.setdefault(session_id, ComparisonBasket())

    def peek(self, session_id: str) -> ComparisonBasket:
        """Return the session's basket, or a detached empty one for unknown sessions"""
        with self._lock:
            basket = self._baskets.get(session_id)
        return basket if basket is not None else ComparisonBasket()

    def discard(self, session_id: str) -> None:
        """Forget a session entirely (end of session)"""
        with self._lock:
            self._baskets.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._baskets)

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._baskets
