"""
Example tool implementations for demonstration purposes.

These tools simulate the web tools the research agents expect, so that the
whole loop can run without a search provider:
- search_internet: returns citations in the ``{"results": [...]}`` shape
- extract_webpage_content: returns the text of a page
"""

import re

from ..core.tools import SingleTool, ToolCatalog
from ..exceptions import ToolExecutionError
from ..models.contracts import ToolParameter


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-") or "topic"


def search_internet(query: str, maxResults: int = 8) -> dict:
    """
    Simulated web search.

    Args:
        query: Search query string
        maxResults: Maximum number of results

    Returns:
        ``{"results": [{"title", "url", "content"}, ...]}``
    """
    slug = _slug(query)
    results = []
    for i in range(min(maxResults, 5)):
        results.append(
            {
                "title": f"{query.title()} - Source {i + 1}",
                "url": f"https://example.org/{slug}/article-{i + 1}",
                "content": (
                    f"Article {i + 1} about {query}. It reviews the current state of the topic, "
                    f"the main open questions and recent developments, with figures from "
                    f"industry reports and academic publications."
                ),
            }
        )
    return {"query": query, "results": results}


def extract_webpage_content(url: str) -> dict:
    """
    Simulated page extraction.

    Args:
        url: Page URL

    Returns:
        ``{"url", "content"}``

    Raises:
        ToolExecutionError: If the URL is not an http(s) URL
    """
    if not url.startswith(("http://", "https://")):
        raise ToolExecutionError(
            f"Cannot extract content from '{url}': not an http(s) URL",
            tool_id="extract_webpage_content",
        )
    return {
        "url": url,
        "content": (
            f"Content of {url}.\n\n"
            "Introduction: background on the topic and why it matters.\n"
            "Findings: three recent studies agree on the main trend, one disagrees on its pace.\n"
            "Outlook: adoption is expected to grow over the next five years."
        ),
    }


def create_search_internet_tool() -> SingleTool:
    """Create the search_internet tool."""
    return SingleTool(
        "search_internet",
        "Search the internet. Returns a list of results with title, url and content.",
        search_internet,
        [
            ToolParameter(name="query", type="string", description="Search query"),
            ToolParameter(
                name="maxResults",
                type="integer",
                description="Maximum number of results to return (default: 8)",
                required=False,
            ),
        ],
    )


def create_extract_webpage_content_tool() -> SingleTool:
    """Create the extract_webpage_content tool."""
    return SingleTool(
        "extract_webpage_content",
        "Download a web page and return its text content.",
        extract_webpage_content,
        [ToolParameter(name="url", type="string", description="URL of the page")],
    )


def register_example_tools(catalog: ToolCatalog) -> ToolCatalog:
    """Register every example tool on a catalog."""
    catalog.register(create_search_internet_tool())
    catalog.register(create_extract_webpage_content_tool())
    return catalog
