"""
File Management Module

Provides downloading and local storage of post photos.
"""

from .manager import MediaDownloader

__all__ = ["MediaDownloader"]
