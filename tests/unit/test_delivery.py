"""
Unit tests for the delivery assembler.
"""

from delve.core.delivery import DeliveryAssembler, dedupe_sources
from delve.models.contracts import SearchResultItem


def store_component(store, partition, body, component_type, **extra):
    item_id = store.store(partition, f"{component_type}", body, {"component_type": component_type, **extra})
    return store.retrieve(partition, item_id)


class TestDeliveryAssembler:
    """Tests for report assembly."""

    def test_sections_ordered_by_number(self, memory_store, partition):
        for n in (3, 1, 2):
            store_component(memory_store, partition, f"Section {n}", "section", section_number=n)

        report = DeliveryAssembler().build_report(memory_store.get_all(partition).values())

        assert report.sections == ["Section 1", "Section 2", "Section 3"]

    def test_missing_section_number_sorts_first(self, memory_store, partition):
        store_component(memory_store, partition, "Numbered", "section", section_number=1)
        store_component(memory_store, partition, "Unnumbered", "section")

        report = DeliveryAssembler().build_report(memory_store.get_all(partition).values())

        assert report.sections == ["Unnumbered", "Numbered"]

    def test_full_document(self, memory_store, partition):
        store_component(memory_store, partition, '{"title": "Quantum Today"}', "title")
        store_component(memory_store, partition, "# Executive Summary\nsummary", "exec_summary")
        store_component(memory_store, partition, "# 2. Two", "section", section_number=2)
        store_component(memory_store, partition, "# 1. One", "section", section_number=1)
        store_component(memory_store, partition, "# Conclusion\nend", "conclusion")
        store_component(
            memory_store,
            partition,
            "raw",
            "search_results",
            search_results=[{"title": "Wiki", "url": "https://en.wikipedia.org/wiki/Qubit_(physics)"}],
        )
        store_component(memory_store, partition, "plan", "plan")

        document = DeliveryAssembler().assemble(memory_store.get_all(partition).values())

        assert document == (
            '<artifact title="Quantum Today">'
            "\n\n# Executive Summary\nsummary"
            "\n\n---\n\n# 1. One"
            "\n\n---\n\n# 2. Two"
            "\n\n---\n\n# Conclusion\nend"
            "\n\n---\n\n### Sources:\n"
            "- [Wiki](https://en.wikipedia.org/wiki/Qubit_%28physics%29)\n"
            "\n</artifact>"
        )

    def test_defaults_when_memory_is_empty(self):
        document = DeliveryAssembler().assemble([])

        assert document == '<artifact title="Research Report">\n</artifact>'

    def test_plain_text_title(self, memory_store, partition):
        store_component(memory_store, partition, "  A Plain Title \n", "title")

        report = DeliveryAssembler().build_report(memory_store.get_all(partition).values())

        assert report.title == "A Plain Title"

    def test_first_summary_and_conclusion_win(self, memory_store, partition):
        store_component(memory_store, partition, "summary 1", "exec_summary")
        store_component(memory_store, partition, "summary 2", "exec_summary")
        store_component(memory_store, partition, "conclusion 1", "conclusion")
        store_component(memory_store, partition, "conclusion 2", "conclusion")

        report = DeliveryAssembler().build_report(memory_store.get_all(partition).values())

        assert report.exec_summary == "summary 1"
        assert report.conclusion == "conclusion 1"

    def test_items_without_component_type_ignored(self, memory_store, partition):
        memory_store.store(partition, "User Request (Full Details)", "request")

        report = DeliveryAssembler().build_report(memory_store.get_all(partition).values())

        assert report.sections == []
        assert report.title == "Research Report"


class TestSourceDedup:
    """Tests for citation deduplication."""

    def test_text_fragment_suffix_ignored(self):
        citations = [
            SearchResultItem(title="First", url="https://a.com/page#:~:text=foo"),
            SearchResultItem(title="Second", url="https://a.com/page"),
            SearchResultItem(title="Other", url="https://b.com"),
        ]

        unique = dedupe_sources(citations)

        assert [c.title for c in unique] == ["First", "Other"]

    def test_citations_without_url_dropped(self):
        unique = dedupe_sources([SearchResultItem(title="No url"), SearchResultItem(title="x", url="https://x")])

        assert [c.title for c in unique] == ["x"]

    def test_dedup_across_search_items(self, memory_store, partition):
        store_component(
            memory_store,
            partition,
            "r1",
            "search_results",
            search_results=[{"title": "A", "url": "https://a.com#:~:text=one"}],
        )
        store_component(
            memory_store,
            partition,
            "r2",
            "search_results",
            search_results=[{"title": "A again", "url": "https://a.com#:~:text=two"}],
        )

        document = DeliveryAssembler().assemble(memory_store.get_all(partition).values())

        assert document.count("- [") == 1
        assert "- [A](https://a.com#:~:text=one)" in document
