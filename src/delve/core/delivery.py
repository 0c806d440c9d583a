"""
Delivery assembler: composes the final report from the memory of a run.
"""

from collections.abc import Iterable

from pydantic import BaseModel, Field

from ..llm.prompts import parse_json
from ..models.contracts import MemoryItem, SearchResultItem
from ..models.enums import ComponentType
from ..utils.error_handler import ErrorHandler


DEFAULT_REPORT_TITLE = "Research Report"
TEXT_FRAGMENT_MARKER = "#:~:text="
SEPARATOR = "\n\n---\n\n"


class Report(BaseModel):
    """Research report components extracted from memory."""

    title: str = DEFAULT_REPORT_TITLE
    exec_summary: str = ""
    sections: list[str] = Field(default_factory=list)
    conclusion: str = ""
    sources: list[SearchResultItem] = Field(default_factory=list)


def _parse_title(body: str) -> str:
    data = ErrorHandler.handle_with_fallback(
        lambda: parse_json(body),
        fallback=None,
        error_msg="report_title_not_json",
        log_level="debug",
    )
    if isinstance(data, dict) and data.get("title"):
        return str(data["title"])
    return body.strip()


def dedupe_sources(citations: Iterable[SearchResultItem]) -> list[SearchResultItem]:
    """
    Drop citations without URL and duplicates.

    Two citations are duplicates when their URLs match once any text
    fragment suffix is stripped. The first one seen wins.
    """
    unique: dict[str, SearchResultItem] = {}
    for citation in citations:
        if not citation.url:
            continue
        key = citation.url.split(TEXT_FRAGMENT_MARKER)[0]
        if key not in unique:
            unique[key] = citation
    return list(unique.values())


class DeliveryAssembler:
    """
    Builds the report document.

    Example:
        assembler = DeliveryAssembler()
        document = assembler.assemble(store.get_all(partition).values())
    """

    def build_report(self, items: Iterable[MemoryItem]) -> Report:
        by_type: dict[ComponentType, list[MemoryItem]] = {}
        for item in items:
            component_type = item.component_type
            if component_type is not None:
                by_type.setdefault(component_type, []).append(item)

        report = Report()

        titles = by_type.get(ComponentType.TITLE)
        if titles:
            report.title = _parse_title(titles[0].body) or DEFAULT_REPORT_TITLE

        if by_type.get(ComponentType.EXEC_SUMMARY):
            report.exec_summary = by_type[ComponentType.EXEC_SUMMARY][0].body
        if by_type.get(ComponentType.CONCLUSION):
            report.conclusion = by_type[ComponentType.CONCLUSION][0].body

        sections = sorted(
            by_type.get(ComponentType.SECTION, []),
            key=lambda item: item.metadata().section_number or 0,
        )
        report.sections = [item.body for item in sections]

        citations: list[SearchResultItem] = []
        for item in by_type.get(ComponentType.SEARCH_RESULTS, []):
            citations.extend(item.metadata().search_results or [])
        report.sources = dedupe_sources(citations)

        return report

    def render(self, report: Report) -> str:
        """Render a report as an artifact document."""
        document = f'<artifact title="{report.title}">'

        if report.exec_summary:
            document += f"\n\n{report.exec_summary}"

        for section in report.sections:
            document += f"{SEPARATOR}{section}"

        if report.conclusion:
            document += f"{SEPARATOR}{report.conclusion}"

        if report.sources:
            document += f"{SEPARATOR}### Sources:\n"
            for source in report.sources:
                url = source.url.replace("(", "%28").replace(")", "%29")
                document += f"- [{source.title}]({url})\n"

        document += "\n</artifact>"
        return document

    def assemble(self, items: Iterable[MemoryItem]) -> str:
        """Build and render the report from memory items."""
        with ErrorHandler.log_duration("delivery_assembly") as fields:
            report = self.build_report(items)
            document = self.render(report)
            fields.update(
                title=report.title,
                sections=len(report.sections),
                sources=len(report.sources),
            )
        return document
