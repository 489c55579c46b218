"""
Matching connector.

Click-to-connect state for one MATCHING question: the recorded connections
plus which left item (if any) is selected. The one-to-one rule is kept by
construction: a connection that would reuse a connected item is dropped.
"""

from __future__ import annotations

from ..types import Connection, MatchingData


class MatchingConnector:
    """Connections and selection state for one matching question."""

    def __init__(self, data: MatchingData):
        self._left_ids = {item.id for item in data.left_items}
        self._right_ids = {item.id for item in data.right_items}
        self._connections: list[Connection] = []
        self.selected_left: str | None = None
        self.frozen = False

    @property
    def connections(self) -> list[Connection]:
        return list(self._connections)

    def is_left_connected(self, left_id: str) -> bool:
        return any(c.left_id == left_id for c in self._connections)

    def is_right_connected(self, right_id: str) -> bool:
        return any(c.right_id == right_id for c in self._connections)

    def is_connection_allowed(self, left_id: str, right_id: str) -> bool:
        """True if neither item is already used by another connection."""
        return not self.is_left_connected(left_id) and not self.is_right_connected(right_id)

    def click_left(self, left_id: str) -> None:
        """Select a left item; clicking the selected one again deselects it."""
        if self.frozen or left_id not in self._left_ids:
            return
        self.selected_left = None if self.selected_left == left_id else left_id

    def click_right(self, right_id: str) -> bool:
        """
        Connect the selected left item to this right item.

        Returns True when the connection set changed. A repeated pair is
        removed; a pair that would break one-to-one is ignored and the
        selection is kept.
        """
        if self.frozen or self.selected_left is None or right_id not in self._right_ids:
            return False

        pair = Connection(left_id=self.selected_left, right_id=right_id)
        if pair in self._connections:
            self._connections.remove(pair)
            self.selected_left = None
            return True

        if not self.is_connection_allowed(pair.left_id, pair.right_id):
            return False

        self._connections.append(pair)
        self.selected_left = None
        return True

    def remove(self, connection: Connection) -> bool:
        if self.frozen:
            return False
        pair = Connection(left_id=connection.left_id, right_id=connection.right_id)
        if pair not in self._connections:
            return False
        self._connections.remove(pair)
        return True

    def clear(self) -> None:
        if self.frozen:
            return
        self._connections.clear()
        self.selected_left = None

    def freeze(self) -> list[Connection]:
        self.frozen = True
        self.selected_left = None
        return self.connections
