"""
Pagination Module

Walks every photo post of a blog one page at a time:

1. Ask for the total once.
2. Fetch the page at the current offset and advance the offset by the
   number of posts it held.
3. Stop when the offset reaches the total, or as soon as a page comes back
   empty (the total may be stale).

A failed page aborts the walk; the error is re-raised unchanged.
"""

import logging
from typing import AsyncIterator, List, Optional, Protocol

from .models import Post


logger = logging.getLogger(__name__)


class PostsSource(Protocol):
    """What the paginator needs from a client."""

    async def fetch_total_count(self) -> int:
        ...

    async def fetch_posts_page(self, offset: int) -> List[Post]:
        ...


class PostPaginator:
    """
    Async iterator over pages of posts.

    Example:
        async for page in PostPaginator(client):
            ...
    """

    def __init__(self, source: PostsSource, start_offset: int = 0):
        if start_offset < 0:
            raise ValueError(f"start_offset must be non-negative, got {start_offset}")
        self._source = source
        self.start_offset = start_offset
        self.total: Optional[int] = None
        self.pages_fetched = 0

    def __aiter__(self) -> AsyncIterator[List[Post]]:
        return self.pages()

    async def pages(self) -> AsyncIterator[List[Post]]:
        """Yield each non-empty page in offset order."""
        self.total = await self._source.fetch_total_count()
        self.pages_fetched = 0
        offset = self.start_offset

        logger.info(f"Paginating {self.total} posts starting at offset {offset}")

        while offset < self.total:
            page = await self._source.fetch_posts_page(offset)
            self.pages_fetched += 1

            if not page:
                logger.warning(
                    f"Empty page at offset {offset} (reported total: {self.total}), stopping"
                )
                return

            logger.info(f"Page {self.pages_fetched}: {len(page)} posts at offset {offset}")
            offset += len(page)
            yield page

        logger.info(f"Pagination complete after {self.pages_fetched} page(s)")

    async def collect(self) -> List[Post]:
        """Fetch every page and return all posts in order."""
        posts: List[Post] = []
        async for page in self.pages():
            posts.extend(page)
        return posts


async def fetch_all_posts(source: PostsSource, start_offset: int = 0) -> List[Post]:
    """Convenience wrapper: every post from ``start_offset`` to the end."""
    return await PostPaginator(source, start_offset=start_offset).collect()
