"""
imagr - download the photos of a blog's photo posts.
"""

__version__ = "0.1.0"
