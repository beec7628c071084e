"""
Configuration for the imagr blog media client.

This module centralizes all configurable parameters. A ``Config`` is built
once at startup and handed to the components that need it; nothing here
keeps process-wide mutable state.
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Mapping, Optional


API_KEY_ENV_VAR = "IMAGR_TOKEN"


class ConfigurationError(ValueError):
    """Raised when required settings are missing or invalid."""


@dataclass(frozen=True)
class Credentials:
    """API key and blog identifier used for every request."""
    api_key: str
    blog_identifier: str

    def __post_init__(self):
        if not self.api_key:
            raise ConfigurationError("API key must not be empty")
        if not self.blog_identifier or not self.blog_identifier.strip():
            raise ConfigurationError("Blog identifier must not be empty")

    def __repr__(self) -> str:
        return f"Credentials(api_key='***', blog_identifier={self.blog_identifier!r})"

    @classmethod
    def from_env(
        cls,
        blog_identifier: Optional[str],
        environ: Optional[Mapping[str, str]] = None
    ) -> "Credentials":
        """
        Build credentials from the process environment.

        Args:
            blog_identifier: Blog name or hostname supplied by the user.
            environ: Mapping to read from (defaults to ``os.environ``).

        Returns:
            Credentials instance.

        Raises:
            ConfigurationError: If the identifier or the API key is missing.
        """
        environ = os.environ if environ is None else environ

        if not blog_identifier:
            raise ConfigurationError("missing blog identifier")

        api_key = environ.get(API_KEY_ENV_VAR)
        if not api_key:
            raise ConfigurationError(
                f"environment variable {API_KEY_ENV_VAR} is not set"
            )

        return cls(api_key=api_key, blog_identifier=blog_identifier)


@dataclass
class APIConfig:
    """API configuration settings."""
    base_url: str = "https://api.tumblr.com"
    api_version: str = "v2"
    timeout_seconds: float = 10.0
    max_page_size: int = 20  # Largest `limit` the posts endpoint accepts
    user_agent: str = "imagr/0.1"

    def __post_init__(self):
        if self.max_page_size < 1:
            raise ConfigurationError(
                f"max_page_size must be positive, got {self.max_page_size}"
            )
        if self.timeout_seconds <= 0:
            raise ConfigurationError(
                f"timeout_seconds must be positive, got {self.timeout_seconds}"
            )


@dataclass
class FileConfig:
    """Settings for saving downloaded photos."""
    output_directory: Path = field(default_factory=lambda: Path("downloads"))
    file_name_template: str = "{post_id}_{index}{ext}"
    default_extension: str = ".jpg"
    overwrite: bool = False

    def get_file_name(self, post_id: int, index: int, ext: Optional[str] = None) -> str:
        """Generate the file name for one photo of a post."""
        return self.file_name_template.format(
            post_id=post_id,
            index=index,
            ext=ext or self.default_extension
        )


@dataclass
class LogConfig:
    """Logging configuration."""
    log_directory: Path = field(default_factory=lambda: Path("logs"))
    log_filename: str = "imagr.log"
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @property
    def log_file_path(self) -> Path:
        """Get full path to the log file."""
        return self.log_directory / self.log_filename


@dataclass
class Config:
    """Master configuration combining all sub-configurations."""
    api: APIConfig = field(default_factory=APIConfig)
    file: FileConfig = field(default_factory=FileConfig)
    log: LogConfig = field(default_factory=LogConfig)
