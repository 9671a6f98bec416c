"""
Domain entities for posts.

Typed records standing in for the loosely typed objects WordPress hands
around (WP_Post, WP_User, WP_Term). These entities know nothing about how
a host stores them.
"""

from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

ZERO_DATE = "0000-00-00 00:00:00"

# Record field -> WordPress column
COLUMN_NAMES: Dict[str, str] = {
    "id": "ID",
    "post_type": "post_type",
    "title": "post_title",
    "slug": "post_name",
    "content": "post_content",
    "excerpt": "post_excerpt",
    "status": "post_status",
    "author_id": "post_author",
    "parent_id": "post_parent",
    "menu_order": "menu_order",
    "date": "post_date",
    "modified": "post_modified",
}

INT_FIELDS = {"id", "author_id", "parent_id", "menu_order"}
DATE_FIELDS = {"date", "modified"}


class PostStatus(str, Enum):
    """Built-in WordPress post statuses."""

    PUBLISH = "publish"
    FUTURE = "future"
    DRAFT = "draft"
    PENDING = "pending"
    PRIVATE = "private"
    TRASH = "trash"
    AUTO_DRAFT = "auto-draft"
    INHERIT = "inherit"


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Parse a WordPress date value.

    Accepts datetimes, MySQL DATETIME strings and ISO 8601 strings.
    The zero date WordPress stores for unscheduled drafts maps to None.
    """
    if value is None or value == "" or value == ZERO_DATE:
        return None
    if isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1]
    return datetime.fromisoformat(text)


def _coerce_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


@dataclass
class PostRecord:
    """
    One content record as stored by the host.

    ``id`` stays None until the host assigns one on first insert.
    """

    id: Optional[int] = None
    post_type: Optional[str] = None
    title: Optional[str] = None
    slug: Optional[str] = None
    content: Optional[str] = None
    excerpt: Optional[str] = None
    status: Optional[str] = None
    author_id: Optional[int] = None
    parent_id: Optional[int] = None
    menu_order: Optional[int] = None
    date: Optional[datetime] = None
    modified: Optional[datetime] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PostRecord":
        """
        Build a record from a mapping.

        Keys may be WordPress column names (``ID``, ``post_title`` ...) or
        the record's own field names. Unknown keys are ignored.

        Args:
            data: Mapping of field values

        Returns:
            A new PostRecord
        """
        by_column = {column: name for name, column in COLUMN_NAMES.items()}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            name = by_column.get(key, key)
            if name not in COLUMN_NAMES:
                continue
            if name in INT_FIELDS:
                value = _coerce_int(value)
            elif name in DATE_FIELDS:
                value = parse_datetime(value)
            values[name] = value
        return cls(**values)

    def to_mapping(self) -> Dict[str, Any]:
        """Return every set field keyed by its WordPress column name."""
        return {
            COLUMN_NAMES[f.name]: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass(frozen=True)
class Author:
    """A WordPress user as seen from a post."""

    id: int
    login: Optional[str] = None
    email: Optional[str] = None
    display_name: Optional[str] = None


@dataclass(frozen=True)
class Tag:
    """A term of the post_tag taxonomy."""

    id: int
    name: str
    slug: str


class PostQuery(BaseModel):
    """
    Criteria for a bulk post query.

    Mirrors the WP_Query argument names. Criteria this model does not name
    are kept (``extra="allow"``) and handed to the host unchanged.
    """

    model_config = ConfigDict(extra="allow")

    post_type: Union[str, List[str], None] = None
    posts_per_page: int = Field(default=10, ge=-1)
    paged: int = Field(default=1, ge=1)
    offset: Optional[int] = Field(default=None, ge=0)
    order: str = "DESC"
    orderby: str = "date"
    post_status: Union[str, List[str], None] = None
    name: Optional[str] = None
    p: Optional[int] = None
    post__in: Optional[List[int]] = None
    post_parent: Optional[int] = None
    author: Optional[int] = None
    s: Optional[str] = None
    tag: Optional[str] = None
    meta_key: Optional[str] = None
    meta_value: Optional[Any] = None

    @field_validator("order")
    @classmethod
    def validate_order(cls, value: str) -> str:
        """WP_Query falls back to DESC for anything but ASC."""
        return "ASC" if str(value).upper() == "ASC" else "DESC"

    def extra_criteria(self) -> Dict[str, Any]:
        """Criteria passed in that are not modelled explicitly."""
        return dict(self.model_extra or {})

    def statuses(self) -> Optional[List[str]]:
        """
        Statuses to match, or None for "any".

        Returns:
            List of statuses; ``publish`` when none were requested
        """
        if self.post_status is None:
            return [PostStatus.PUBLISH.value]
        requested = (
            [self.post_status] if isinstance(self.post_status, str) else list(self.post_status)
        )
        if "any" in requested:
            return None
        return requested

    def post_types(self) -> Optional[List[str]]:
        """Post types to match, or None for "any"."""
        if self.post_type is None:
            return ["post"]
        requested = (
            [self.post_type] if isinstance(self.post_type, str) else list(self.post_type)
        )
        if "any" in requested:
            return None
        return requested
