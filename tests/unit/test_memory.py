"""
Unit tests for the partitioned memory store.
"""

from delve.core.memory import MemoryStore
from delve.models.contracts import MemoryItem


class TestMemoryStore:
    """Tests for MemoryStore."""

    def test_store_and_retrieve(self, memory_store, partition):
        item_id = memory_store.store(partition, "Plan", "plan body", {"component_type": "plan"})

        item = memory_store.retrieve(partition, item_id)

        assert isinstance(item, MemoryItem)
        assert item.id == item_id
        assert item.title == "Plan"
        assert item.body == "plan body"
        assert item.extra == {"component_type": "plan"}

    def test_ids_are_unique_within_partition(self, memory_store, partition):
        ids = {memory_store.store(partition, f"t{i}", "body") for i in range(200)}

        assert len(ids) == 200
        assert all(len(item_id) == 8 for item_id in ids)

    def test_id_collision_is_regenerated(self, memory_store, partition, mocker):
        mocker.patch.object(
            MemoryStore, "_new_id", side_effect=["aaaaaaaa", "aaaaaaaa", "bbbbbbbb"]
        )

        first = memory_store.store(partition, "first", "1")
        second = memory_store.store(partition, "second", "2")

        assert first == "aaaaaaaa"
        assert second == "bbbbbbbb"

    def test_unknown_id_returns_none(self, memory_store, partition):
        memory_store.store(partition, "t", "b")

        assert memory_store.retrieve(partition, "missing") is None

    def test_partitions_are_isolated(self, memory_store):
        item_id = memory_store.store("run-a", "secret", "body")

        assert memory_store.retrieve("run-b", item_id) is None
        assert memory_store.list_titles("run-b") == []
        assert memory_store.get_all("run-b") == {}

    def test_reading_unknown_partition_does_not_create_it(self, memory_store):
        memory_store.retrieve("ghost", "x")
        memory_store.list_titles("ghost")
        memory_store.get_all("ghost")

        assert memory_store.partitions() == []

    def test_list_titles_in_insertion_order(self, memory_store, partition):
        ids = [memory_store.store(partition, f"title {i}", "b") for i in range(5)]

        titles = memory_store.list_titles(partition)

        assert [t.id for t in titles] == ids
        assert [t.title for t in titles] == [f"title {i}" for i in range(5)]

    def test_get_all_returns_copy(self, memory_store, partition):
        memory_store.store(partition, "t", "b")

        snapshot = memory_store.get_all(partition)
        snapshot.clear()

        assert len(memory_store.get_all(partition)) == 1

    def test_clear_is_idempotent(self, memory_store, partition):
        memory_store.store(partition, "t", "b")

        memory_store.clear(partition)
        memory_store.clear(partition)

        assert memory_store.list_titles(partition) == []
        assert partition not in memory_store.partitions()

    def test_clear_leaves_other_partitions(self, memory_store):
        keep_id = memory_store.store("keep", "t", "b")
        memory_store.store("drop", "t", "b")

        memory_store.clear("drop")

        assert memory_store.retrieve("keep", keep_id) is not None

    def test_item_metadata_view(self, memory_store, partition):
        item_id = memory_store.store(
            partition,
            "search",
            "results",
            {
                "agent_name": "search",
                "component_type": "search_results",
                "search_results": [{"title": "A", "url": "https://a.example"}],
                "unexpected": True,
            },
        )

        metadata = memory_store.retrieve(partition, item_id).metadata()

        assert metadata.agent_name == "search"
        assert metadata.search_results[0].url == "https://a.example"
        assert metadata.section_number is None

    def test_item_serializes_losslessly(self, memory_store, partition):
        item_id = memory_store.store(partition, "t", "b", {"section_number": 2.0})
        item = memory_store.retrieve(partition, item_id)

        assert MemoryItem.model_validate(item.model_dump()) == item
