"""
Tests for the Media Downloader

Tests for file naming and saving post photos.
"""

import httpx
import pytest
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from imagr.api.errors import DecodeError, TransportError
from imagr.api.models import Photo, PhotoSize, Post
from imagr.api.transport import HttpxTransport
from imagr.config import FileConfig
from imagr.files.manager import MediaDownloader


def make_transport(handler):
    return HttpxTransport(httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def serve_url_bytes(request):
    """Answer with the requested path as the file content."""
    return httpx.Response(200, content=request.url.path.encode())


def photo(*sizes):
    return Photo(sizes=[PhotoSize(width=w, height=h, url=url) for w, h, url in sizes])


class TestFileNaming:
    """Tests for target paths."""

    @pytest.fixture
    def downloader(self, tmp_path):
        """Create a MediaDownloader writing into a temp directory."""
        return MediaDownloader(transport=None, file_config=FileConfig(output_directory=tmp_path))

    def test_extension_from_url(self, downloader, tmp_path):
        """Test that a known extension is taken from the URL."""
        path = downloader.get_file_path(123, 0, "https://media.example.com/abc_1280.png?x=1")

        assert path == tmp_path / "123_0.png"

    def test_default_extension(self, downloader, tmp_path):
        """Test the fallback extension for unknown URLs."""
        path = downloader.get_file_path(123, 2, "https://media.example.com/photo/1280/123/1/abc")

        assert path == tmp_path / "123_2.jpg"

    def test_summary_without_directory(self, tmp_path):
        """Test the summary of a directory that does not exist yet."""
        downloader = MediaDownloader(None, FileConfig(output_directory=tmp_path / "missing"))

        summary = downloader.get_summary()

        assert summary["directory_exists"] is False
        assert summary["file_count"] == 0


class TestDownloadPost:
    """Tests for saving photos."""

    @pytest.mark.asyncio
    async def test_saves_largest_size(self, tmp_path):
        """Test that only the largest rendition of each photo is saved."""
        requested = []

        def handler(request):
            requested.append(str(request.url))
            return serve_url_bytes(request)

        post = Post(id=7, photos=[
            photo((75, 75, "https://m.example.com/a_75.jpg"), (1280, 720, "https://m.example.com/a_1280.jpg")),
            photo((500, 500, "https://m.example.com/b_500.gif")),
        ])

        async with make_transport(handler) as transport:
            downloader = MediaDownloader(transport, FileConfig(output_directory=tmp_path / "out"))
            saved = await downloader.download_post(post)

        assert requested == ["https://m.example.com/a_1280.jpg", "https://m.example.com/b_500.gif"]
        assert [p.name for p in saved] == ["7_0.jpg", "7_1.gif"]
        assert (tmp_path / "out" / "7_0.jpg").read_bytes() == b"/a_1280.jpg"
        assert downloader.get_summary()["file_count"] == 2

    @pytest.mark.asyncio
    async def test_skips_existing_files(self, tmp_path):
        """Test that files already on disk are not fetched again."""
        (tmp_path / "7_0.jpg").write_bytes(b"old")
        post = Post(id=7, photos=[photo((10, 10, "https://m.example.com/a.jpg"))])

        def handler(request):
            pytest.fail("no download expected")

        async with make_transport(handler) as transport:
            downloader = MediaDownloader(transport, FileConfig(output_directory=tmp_path))
            saved = await downloader.download_post(post)

        assert saved == []
        assert (tmp_path / "7_0.jpg").read_bytes() == b"old"

    @pytest.mark.asyncio
    async def test_overwrite(self, tmp_path):
        """Test that overwrite replaces existing files."""
        (tmp_path / "7_0.jpg").write_bytes(b"old")
        post = Post(id=7, photos=[photo((10, 10, "https://m.example.com/a.jpg"))])

        async with make_transport(serve_url_bytes) as transport:
            downloader = MediaDownloader(transport, FileConfig(output_directory=tmp_path, overwrite=True))
            saved = await downloader.download_post(post)

        assert saved == [tmp_path / "7_0.jpg"]
        assert (tmp_path / "7_0.jpg").read_bytes() == b"/a.jpg"

    @pytest.mark.asyncio
    async def test_photo_without_sizes_skipped(self, tmp_path):
        """Test that photos with no renditions are ignored."""
        post = Post(id=1, photos=[Photo(sizes=[])])

        async with make_transport(serve_url_bytes) as transport:
            downloader = MediaDownloader(transport, FileConfig(output_directory=tmp_path))
            assert await downloader.download_post(post) == []

    @pytest.mark.asyncio
    async def test_http_error_propagates(self, tmp_path):
        """Test that a missing photo raises TransportError and writes nothing."""
        post = Post(id=1, photos=[photo((10, 10, "https://m.example.com/gone.jpg"))])

        async with make_transport(lambda request: httpx.Response(404)) as transport:
            downloader = MediaDownloader(transport, FileConfig(output_directory=tmp_path))
            with pytest.raises(TransportError):
                await downloader.download_post(post)

        assert downloader.list_saved_files() == []

    @pytest.mark.asyncio
    async def test_malformed_url_is_decode_error(self, tmp_path):
        """Test that an unparseable photo URL raises DecodeError, not ValueError."""
        post = Post(id=1, photos=[photo((10, 10, "http://[bad]/x.jpg"))])

        def handler(request):
            pytest.fail("no download expected")

        async with make_transport(handler) as transport:
            downloader = MediaDownloader(transport, FileConfig(output_directory=tmp_path))
            with pytest.raises(DecodeError):
                await downloader.download_post(post)

    @pytest.mark.asyncio
    async def test_failed_write_leaves_no_file(self, tmp_path, monkeypatch):
        """Test that an interrupted write leaves neither the photo nor a partial file."""
        post = Post(id=7, photos=[photo((10, 10, "https://m.example.com/a.jpg"))])

        def failing_replace(self, target):
            raise OSError("disk full")

        monkeypatch.setattr(Path, "replace", failing_replace)

        async with make_transport(serve_url_bytes) as transport:
            downloader = MediaDownloader(transport, FileConfig(output_directory=tmp_path))
            with pytest.raises(OSError):
                await downloader.download_post(post)

        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_retry_after_failed_write_downloads_again(self, tmp_path, monkeypatch):
        """Test that a photo whose write failed is fetched on the next run."""
        post = Post(id=7, photos=[photo((10, 10, "https://m.example.com/a.jpg"))])
        real_replace = Path.replace

        def failing_replace(self, target):
            raise OSError("disk full")

        async with make_transport(serve_url_bytes) as transport:
            downloader = MediaDownloader(transport, FileConfig(output_directory=tmp_path))
            monkeypatch.setattr(Path, "replace", failing_replace)
            with pytest.raises(OSError):
                await downloader.download_post(post)

            monkeypatch.setattr(Path, "replace", real_replace)
            saved = await downloader.download_post(post)

        assert saved == [tmp_path / "7_0.jpg"]
        assert (tmp_path / "7_0.jpg").read_bytes() == b"/a.jpg"


if __name__ == "__main__":
    pytest.main([__file__, "-v", "-s"])
