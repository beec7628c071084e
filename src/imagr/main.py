"""
Main Orchestrator Module

This is the entry point for imagr. Orchestrates the complete workflow:

1. Read the blog identifier (argument) and API key (IMAGR_TOKEN)
2. Ask the API how many photo posts the blog has
3. Walk the posts page by page
4. Download the largest rendition of every photo
5. Report results
"""

import argparse
import asyncio
import logging
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from .api import BlogClient, HttpxTransport, ImagrError, PostPaginator
from .config import Config, ConfigurationError, Credentials
from .files import MediaDownloader


USAGE = "Usage: imagr <blog_identifier>"


def setup_logging(config: Config, log_level: Optional[str] = None) -> logging.Logger:
    """Set up logging for the application."""
    level = getattr(logging, (log_level or config.log.log_level).upper())

    # Ensure log directory exists
    config.log.log_directory.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("imagr")
    logger.setLevel(level)

    # Replace handlers from an earlier call instead of stacking them
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Console handler; stdout is kept for command output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%H:%M:%S"
    ))

    # File handler
    file_handler = logging.FileHandler(
        config.log.log_file_path,
        mode='w',
        encoding='utf-8'
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(config.log.log_format))

    logger.addHandler(console_handler)
    logger.addHandler(file_handler)

    return logger


@dataclass
class RunResult:
    """Result of a complete run."""
    success: bool
    total_posts: int
    posts_seen: int
    pages_fetched: int
    files_saved: List[Path] = field(default_factory=list)
    error: Optional[str] = None
    total_duration_seconds: float = 0.0


class BlogDownload:
    """
    Orchestrator for fetching a blog's photo posts and saving their photos.
    """

    def __init__(
        self,
        client: BlogClient,
        downloader: Optional[MediaDownloader] = None,
        start_offset: int = 0
    ):
        """
        Args:
            client: API client for the blog.
            downloader: Saves photos; when None, posts are only listed.
            start_offset: Offset of the first post to fetch.
        """
        self.logger = logging.getLogger("imagr.main")
        self.client = client
        self.downloader = downloader
        self.start_offset = start_offset

    async def run(self) -> RunResult:
        """
        Execute the complete workflow.

        Returns:
            RunResult with details of the run. The first failure stops the run
            and is recorded in ``error``.
        """
        start_time = time.time()
        paginator = PostPaginator(self.client, start_offset=self.start_offset)
        posts_seen = 0
        files_saved: List[Path] = []
        error = None

        self.logger.info("=" * 60)
        self.logger.info(f"Fetching photo posts of {self.client.blog_identifier}")
        self.logger.info("=" * 60)

        try:
            async for page in paginator:
                posts_seen += len(page)
                if self.downloader is None:
                    continue
                for post in page:
                    files_saved.extend(await self.downloader.download_post(post))
        except ImagrError as e:
            self.logger.error(f"Run aborted: {e}")
            error = str(e)

        total_duration = time.time() - start_time

        self.logger.info("=" * 60)
        self.logger.info("Run Complete")
        self.logger.info(f"Total posts: {paginator.total}")
        self.logger.info(f"Posts fetched: {posts_seen}")
        self.logger.info(f"Pages fetched: {paginator.pages_fetched}")
        self.logger.info(f"Files saved: {len(files_saved)}")
        self.logger.info(f"Duration: {total_duration:.1f}s")
        self.logger.info("=" * 60)

        return RunResult(
            success=error is None,
            total_posts=paginator.total or 0,
            posts_seen=posts_seen,
            pages_fetched=paginator.pages_fetched,
            files_saved=files_saved,
            error=error,
            total_duration_seconds=total_duration
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imagr",
        description="Download the photos of a blog's photo posts."
    )
    parser.add_argument("blog_identifier", nargs="?",
                        help="Blog name or hostname, e.g. staff.tumblr.com")
    parser.add_argument("--output", type=Path, default=None,
                        help="Directory to save photos into")
    parser.add_argument("--offset", type=int, default=0,
                        help="Offset of the first post to fetch")
    parser.add_argument("--count-only", action="store_true",
                        help="Only print the number of photo posts")
    parser.add_argument("--no-download", action="store_true",
                        help="Walk the posts without saving photos")
    parser.add_argument("--log-level", default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Console log level")
    return parser


async def run(args: argparse.Namespace, config: Config, credentials: Credentials) -> int:
    """Run the requested command and return the process exit code."""
    async with HttpxTransport(api_config=config.api) as transport:
        client = BlogClient(transport, credentials, config.api)

        if args.count_only:
            print(await client.fetch_total_count())
            return 0

        downloader = None if args.no_download else MediaDownloader(transport, config.file)
        result = await BlogDownload(client, downloader, start_offset=args.offset).run()
        return 0 if result.success else 1


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for imagr."""
    args = build_parser().parse_args(argv)

    config = Config()
    if args.output is not None:
        config.file.output_directory = args.output

    logger = setup_logging(config, args.log_level)

    try:
        if args.offset < 0:
            raise ConfigurationError(f"offset must be non-negative, got {args.offset}")
        credentials = Credentials.from_env(args.blog_identifier)
    except ConfigurationError as e:
        print(f"{USAGE}\nError: {e}")
        sys.exit(1)

    try:
        sys.exit(asyncio.run(run(args, config, credentials)))

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)

    except ImagrError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)

    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
