"""
Update-Many Builder
===================

Accumulates per-operator batches of field updates for a single
update_many command. Repeated operators are merged into one batch and
the order in which operators were first used is preserved:

    builder.add(Operator.SET, ("name", "Asari")) \\
           .add(Operator.MUL, ("count", 2)) \\
           .add(Operator.SET, ("email", "asari@gmail.com"))

produces {"$set": {"name": "Asari", "email": "asari@gmail.com"}, "$mul": {"count": 2}}.
"""
import logging
import threading
from typing import Any, Dict, List, Tuple

logger = logging.getLogger(__name__)

Update = Tuple[str, Any]


class UpdateManyBuilder:
    """Lock-protected accumulator of operator -> [(field, value), ...]."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._operations: Dict[str, List[Update]] = {}

    def add(self, operator: str, *updates: Update) -> "UpdateManyBuilder":
        """
        Add field updates under an operator token.

        Args:
            operator: Update operator token, e.g. Operator.SET
            *updates: (field, value) pairs

        Returns:
            The builder, so calls can be chained
        """
        if not updates:
            logger.warning(f"Call to add() with zero updates for {operator!r}, ignoring")
            return self

        with self._lock:
            existing = self._operations.get(operator)
            if existing is not None:
                existing.extend(updates)
            else:
                self._operations[operator] = list(updates)
        return self

    def get(self) -> Dict[str, List[Update]]:
        """
        Return all accumulated operations in first-use order.

        Use has_values() to check for emptiness.
        """
        return self._operations

    def has_values(self) -> bool:
        return len(self._operations) > 0

    def to_update_document(self) -> Dict[str, Dict[str, Any]]:
        """Render the operations as a MongoDB update document."""
        return {operator: dict(updates) for operator, updates in self._operations.items()}
