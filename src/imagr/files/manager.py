"""
Media Downloader Module

Saves the photos referenced by posts into the output directory.
Handles directory creation, file naming and skipping files already on disk.
"""

import logging
from pathlib import Path, PurePosixPath
from typing import List, Optional

import httpx

from ..api.errors import DecodeError
from ..api.models import Post
from ..api.transport import Transport
from ..config import FileConfig


logger = logging.getLogger(__name__)

# Extensions accepted from a photo URL as-is
KNOWN_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".tif", ".tiff"}


class MediaDownloader:
    """
    Downloads the largest rendition of every photo of a post.
    """

    def __init__(self, transport: Transport, file_config: Optional[FileConfig] = None):
        """Initialize the downloader."""
        self._transport = transport
        self._file_config = file_config or FileConfig()
        self.output_dir = Path(self._file_config.output_directory)
        logger.info(f"MediaDownloader initialized (output: {self.output_dir})")

    def ensure_output_directory(self) -> Path:
        """
        Ensure the output directory exists.

        Returns:
            Path to the output directory.
        """
        if not self.output_dir.exists():
            logger.info(f"Creating output directory: {self.output_dir}")
            self.output_dir.mkdir(parents=True, exist_ok=True)
        else:
            logger.debug(f"Output directory exists: {self.output_dir}")

        return self.output_dir

    def get_file_path(self, post_id: int, index: int, url: str) -> Path:
        """
        Get the target path for one photo of a post.

        The extension comes from the URL when it is a known image type.

        Raises:
            DecodeError: If ``url`` cannot be parsed.
        """
        try:
            url_path = httpx.URL(url).path
        except httpx.InvalidURL as e:
            raise DecodeError(f"malformed photo url {url!r}: {e}") from e
        suffix = PurePosixPath(url_path).suffix.lower()
        ext = suffix if suffix in KNOWN_EXTENSIONS else None
        return self.output_dir / self._file_config.get_file_name(post_id, index, ext)

    async def download_post(self, post: Post) -> List[Path]:
        """
        Download every photo of ``post``.

        Args:
            post: Post whose photos to save.

        Returns:
            Paths of the files written in this call (skipped files excluded).

        Raises:
            DecodeError: If a photo URL is malformed.
            TransportError: If a photo cannot be fetched.
            OSError: If a file cannot be written.
        """
        self.ensure_output_directory()
        saved: List[Path] = []

        for index, photo in enumerate(post.photos):
            size = photo.largest_size()
            if size is None:
                logger.warning(f"Post {post.id} photo {index} has no sizes, skipping")
                continue

            file_path = self.get_file_path(post.id, index, size.url)
            if file_path.exists() and not self._file_config.overwrite:
                logger.debug(f"Already downloaded: {file_path}")
                continue

            content = await self._transport.get(size.url, check_status=True)
            self._write_file(file_path, content)
            saved.append(file_path)
            logger.info(f"Saved {size.width}x{size.height} photo to {file_path}")

        return saved

    def _write_file(self, file_path: Path, content: bytes) -> None:
        """Write through a temporary file so a failed write never leaves a partial photo."""
        part_path = file_path.with_name(f".{file_path.name}.part")
        try:
            part_path.write_bytes(content)
            part_path.replace(file_path)
        except OSError:
            part_path.unlink(missing_ok=True)
            raise

    def list_saved_files(self) -> List[Path]:
        """
        List all files in the output directory.

        Returns:
            Sorted list of file paths.
        """
        if not self.output_dir.exists():
            return []

        files = [f for f in self.output_dir.iterdir() if f.is_file() and not f.name.startswith(".")]
        return sorted(files, key=lambda f: f.name)

    def get_summary(self) -> dict:
        """
        Get a summary of the output directory.

        Returns:
            Dictionary with output directory info and file counts.
        """
        files = self.list_saved_files()
        return {
            "output_directory": str(self.output_dir),
            "directory_exists": self.output_dir.exists(),
            "file_count": len(files),
            "files": [f.name for f in files]
        }
