"""
wppost - object-oriented access to WordPress posts.

Subclass Post, set POST_TYPE, bind a content host and work with posts as
objects instead of loose arrays.
"""

from wppost.domain.entities import Author, PostQuery, PostRecord, PostStatus, Tag
from wppost.domain.exceptions import (
    HostConfigurationException,
    HostUnavailableException,
    PostModelException,
    PostNotFoundException,
    PostTypeMismatchException,
    PostWriteException,
)
from wppost.hosts import (
    ContentHost,
    DatabaseContentHost,
    WordPressRestHost,
    get_default_host,
    set_default_host,
)
from wppost.logging_config import setup_logging
from wppost.post import Post

__version__ = "1.0.0"

__all__ = [
    "Author",
    "ContentHost",
    "DatabaseContentHost",
    "HostConfigurationException",
    "HostUnavailableException",
    "Post",
    "PostModelException",
    "PostNotFoundException",
    "PostQuery",
    "PostRecord",
    "PostStatus",
    "PostTypeMismatchException",
    "PostWriteException",
    "Tag",
    "WordPressRestHost",
    "get_default_host",
    "set_default_host",
    "setup_logging",
]
