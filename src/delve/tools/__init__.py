"""
Example tools for demonstration and testing.
"""

from .example_tools import (
    create_extract_webpage_content_tool,
    create_search_internet_tool,
    register_example_tools,
)

__all__ = [
    "create_search_internet_tool",
    "create_extract_webpage_content_tool",
    "register_example_tools",
]
