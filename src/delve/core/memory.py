"""
Short-term memory: a partitioned key/value store for run artifacts.

Each orchestration run owns one partition (typically a uuid4 string) so that
concurrent runs sharing one store never see each other's items.
"""

import uuid
from typing import Any

from ..models.contracts import MemoryItem, MemoryTitle
from ..utils.logging import get_logger


class MemoryStore:
    """
    In-process store of write-once memory items, grouped by partition.

    Example:
        store = MemoryStore()
        item_id = store.store(partition, "Research plan", plan_json, {"component_type": "plan"})
        item = store.retrieve(partition, item_id)
        store.clear(partition)
    """

    def __init__(self):
        self.logger = get_logger(__name__)
        self._partitions: dict[str, dict[str, MemoryItem]] = {}

    @staticmethod
    def _new_id() -> str:
        return uuid.uuid4().hex[:8]

    def store(
        self,
        partition: str,
        title: str,
        body: str,
        extra: dict[str, Any] | None = None,
    ) -> str:
        """
        Store content in a partition.

        Args:
            partition: Partition identifier
            title: Short title shown in the memory index
            body: Content
            extra: Free-form metadata

        Returns:
            Generated id, unique within the partition
        """
        items = self._partitions.setdefault(partition, {})
        item_id = self._new_id()
        while item_id in items:
            item_id = self._new_id()

        items[item_id] = MemoryItem(id=item_id, title=title, body=body, extra=dict(extra or {}))
        self.logger.debug(
            "memory_item_stored",
            partition=partition,
            item_id=item_id,
            title=title[:80],
            with_metadata=bool(extra),
        )
        return item_id

    def retrieve(self, partition: str, item_id: str) -> MemoryItem | None:
        """Return the item, or None when the id is unknown in this partition."""
        return self._partitions.get(partition, {}).get(item_id)

    def list_titles(self, partition: str) -> list[MemoryTitle]:
        """Title index of a partition, in insertion order."""
        return [
            MemoryTitle(id=item.id, title=item.title)
            for item in self._partitions.get(partition, {}).values()
        ]

    def get_all(self, partition: str) -> dict[str, MemoryItem]:
        """Copy of every item in a partition, keyed by id."""
        return dict(self._partitions.get(partition, {}))

    def clear(self, partition: str) -> None:
        """Drop a partition. Clearing an unknown partition is a no-op."""
        removed = self._partitions.pop(partition, None)
        if removed is not None:
            self.logger.debug("memory_partition_cleared", partition=partition, items=len(removed))

    def partitions(self) -> list[str]:
        """Identifiers of partitions currently holding items."""
        return list(self._partitions)
