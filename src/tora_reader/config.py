"""
Configuration loaded from the JSON credentials file.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .client import DEFAULT_BASE_URL
from .exceptions import ToraConfigError
from .models.search_query import DEFAULT_PAGE_SIZE
from .utils import DEFAULT_INDEX_PREFIX

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = ".torars_rc"


def default_config_path() -> Path:
    """Path of the credentials file in the user's home directory."""
    return Path.home() / DEFAULT_CONFIG_FILENAME


@dataclass(frozen=True)
class Config:
    """
    Connection settings for the search backend.

    Attributes:
        user: Basic auth user name.
        password: Basic auth password.
        url: Base URL of the search backend.
        index_prefix: Prefix of the log indices.
        page_size: Number of entries requested per page.
    """

    user: str
    password: str
    url: str = DEFAULT_BASE_URL
    index_prefix: str = DEFAULT_INDEX_PREFIX
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def auth(self) -> tuple[str, str]:
        return (self.user, self.password)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """
        Create Config from the decoded credentials file.

        Expected format:
            {"creds": {"user": "...", "password": "..."},
             "url": "...", "index_prefix": "...", "page_size": 500}

        Only `creds` is required.

        Raises:
            ToraConfigError: If a required key is missing or mistyped.
        """
        if not isinstance(data, dict):
            raise ToraConfigError("Config must be a JSON object")

        creds = data.get("creds")
        if not isinstance(creds, dict):
            raise ToraConfigError("Config has no 'creds' object")

        user = creds.get("user")
        password = creds.get("password")
        if not isinstance(user, str) or not isinstance(password, str):
            raise ToraConfigError("'creds.user' and 'creds.password' must be strings")

        url = data.get("url", DEFAULT_BASE_URL)
        index_prefix = data.get("index_prefix", DEFAULT_INDEX_PREFIX)
        page_size = data.get("page_size", DEFAULT_PAGE_SIZE)
        if not isinstance(url, str) or not isinstance(index_prefix, str):
            raise ToraConfigError("'url' and 'index_prefix' must be strings")
        if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size <= 0:
            raise ToraConfigError("'page_size' must be a positive integer")

        return cls(
            user=user,
            password=password,
            url=url,
            index_prefix=index_prefix,
            page_size=page_size,
        )


def load_config(path: Optional[Union[str, Path]] = None) -> Config:
    """
    Read the credentials file.

    Args:
        path: File to read. Defaults to ~/.torars_rc.

    Returns:
        Config instance.

    Raises:
        ToraConfigError: If the file cannot be read or parsed.
    """
    config_path = Path(path) if path is not None else default_config_path()
    logger.debug("Loading config from %s", config_path)

    try:
        contents = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ToraConfigError(f"Cannot read config file {config_path}: {e}") from e

    try:
        data = json.loads(contents)
    except ValueError as e:
        raise ToraConfigError(f"Invalid JSON in config file {config_path}: {e}") from e

    return Config.from_dict(data)
