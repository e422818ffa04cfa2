"""
Web Research Protocol

Search and page extraction used by the web_search and scrape_webpage tools.
"""

from typing import Any, Protocol


class WebResearchProtocol(Protocol):
    async def search(self, query: str, source: str = "web") -> dict[str, Any]:
        """
        Search for a topic.

        Returns:
            Dict with "results" (list of {title, snippet, url}) and an
            optional "summary". An "error" key is present when the search
            could not be performed.
        """
        ...

    async def scrape(self, url: str) -> dict[str, Any]:
        """
        Extract readable text from a page.

        Returns:
            Dict with title, content, word_count, domain and url. An "error"
            key is present when extraction failed.
        """
        ...
