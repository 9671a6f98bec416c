"""
Object-oriented post model.

``Post`` wraps one WordPress post record in typed getters and fluent
setters and adds save, delete and clone on top of a ContentHost.
Subclasses fix the post type:

    class Article(Post):
        POST_TYPE = "article"
        POST_TYPE_OPTIONS = {"public": True, "label": "Articles"}

    Article.init()
    article = Article.get_instance("hello-world")
    article.set_title("Hello again").save()

Instances are kept in a process-wide identity map, so resolving the same
post twice returns the same object until Post.clear_instances() is called.
"""

from abc import ABC
from dataclasses import replace
from datetime import datetime
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Sequence, Union

import structlog

from .cache import get_instance_cache
from .config import settings
from .domain.entities import Author, PostQuery, PostRecord, Tag
from .domain.exceptions import (
    PostNotFoundException,
    PostTypeMismatchException,
    PostWriteException,
)
from .helpers import format_php_date, parse_tag_list
from .hosts import ContentHost, get_default_host

logger = structlog.get_logger(__name__)

CLONE_TITLE_SUFFIX = "-(Clone)"


def _numeric_id(value: Union[int, str]) -> Optional[int]:
    if isinstance(value, int):
        return value
    text = value.strip()
    return int(text) if text.isascii() and text.isdigit() else None


class Post(ABC):
    """
    Abstract base for typed post classes.

    Attributes:
        POST_TYPE: Post type handled by the subclass
        POST_TYPE_OPTIONS: Options passed when registering the post type
        host: Host used by the subclass; the default host when None
    """

    POST_TYPE: ClassVar[str] = ""
    POST_TYPE_OPTIONS: ClassVar[Dict[str, Any]] = {}
    host: ClassVar[Optional[ContentHost]] = None

    def __init__(self, post: Union[PostRecord, Mapping[str, Any], None] = None):
        """
        Wrap a record.

        Use get_instance() or new_instance() instead so the instance is
        tracked by the identity map.

        Args:
            post: Backing record, a mapping of its fields, or None for a blank one
        """
        if not self.POST_TYPE:
            raise TypeError(f"{type(self).__name__} must define POST_TYPE")
        if post is None:
            post = PostRecord()
        elif not isinstance(post, PostRecord):
            post = PostRecord.from_mapping(post)
        self._post = post

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.get_id()} title={self._post.title!r}>"

    # ------------------------------------------------------------------
    # Class-level API
    # ------------------------------------------------------------------

    @classmethod
    def get_host(cls) -> ContentHost:
        """Host bound to this class, falling back to the default host."""
        return cls.host if cls.host is not None else get_default_host()

    @classmethod
    def bind(cls, host: Optional[ContentHost]) -> None:
        """Bind this class (and subclasses that do not override it) to a host."""
        cls.host = host

    @classmethod
    def init(cls) -> None:
        """Bootstrap the post class."""
        cls.register_post_type()

    @classmethod
    def register_post_type(cls) -> None:
        cls.get_host().register_post_type(cls.POST_TYPE, cls.POST_TYPE_OPTIONS)

    @staticmethod
    def clear_instances() -> None:
        """Forget every cached instance of every post class."""
        get_instance_cache().clear()

    @classmethod
    def get_instance(cls, post: Any) -> Optional["Post"]:
        """
        Resolve a post to its single live instance.

        Args:
            post: A PostRecord, a mapping of record fields, a post ID
                (int or numeric string) or a slug

        Returns:
            The cached or newly built instance, or None when nothing of
            this class's post type matches
        """
        record: Optional[PostRecord] = None

        if isinstance(post, bool):
            return None
        if isinstance(post, (int, str)):
            post_id = _numeric_id(post)
            if post_id is not None:
                cached = get_instance_cache().get(cls, post_id)
                if cached is not None:
                    return cached
                record = cls.get_host().get_post(post_id)
            elif post:
                record = cls._find_by_slug(post)
        elif isinstance(post, PostRecord):
            record = post
        elif isinstance(post, Post):
            record = post.get_post()
        elif isinstance(post, Mapping):
            record = PostRecord.from_mapping(post)

        if record is None or record.post_type != cls.POST_TYPE:
            return None
        return cls._cached_instance(record)

    @classmethod
    def wrap(cls, post: Union[PostRecord, Mapping[str, Any]]) -> Optional["Post"]:
        """
        Like get_instance() for records, but refuses records of another type.

        Raises:
            PostTypeMismatchException: If the record is not of POST_TYPE
        """
        record = post if isinstance(post, PostRecord) else PostRecord.from_mapping(post)
        if record.post_type != cls.POST_TYPE:
            raise PostTypeMismatchException(cls.POST_TYPE, record.post_type)
        return cls._cached_instance(record)

    @classmethod
    def _find_by_slug(cls, slug: str) -> Optional[PostRecord]:
        query = PostQuery(name=slug, post_status="any", post_type=cls.POST_TYPE, posts_per_page=1)
        records = cls.get_host().query_posts(query)
        return records[0] if records else None

    @classmethod
    def _cached_instance(cls, record: PostRecord) -> Optional["Post"]:
        if not record.id:
            return None
        cache = get_instance_cache()
        cached = cache.get(cls, record.id)
        if cached is not None:
            return cached
        return cache.put(cls, record.id, cls(record))

    @classmethod
    def new_instance(cls, **fields: Any) -> "Post":
        """
        Create an unsaved instance.

        Args:
            **fields: Initial record fields (title, content, status ...)

        Returns:
            A blank instance tracked as unsaved until its first save
        """
        record = PostRecord(**fields)
        record.post_type = cls.POST_TYPE
        return get_instance_cache().add_new(cls, cls(record))

    @classmethod
    def get_posts(cls, args: Union[PostQuery, Mapping[str, Any], None] = None) -> List["Post"]:
        """
        Query posts and resolve them to instances.

        Args:
            args: Query criteria merged over the defaults
                (post_type=POST_TYPE, posts_per_page, order)

        Returns:
            Instances of the matching posts; records of another type are skipped
        """
        if isinstance(args, PostQuery):
            args = args.model_dump(exclude_unset=True)
        criteria = {
            "post_type": cls.POST_TYPE,
            "posts_per_page": settings.DEFAULT_POSTS_PER_PAGE,
            "order": settings.DEFAULT_ORDER,
        }
        criteria.update(args or {})

        records = cls.get_host().query_posts(PostQuery(**criteria))
        instances = []
        for record in records:
            instance = cls.get_instance(record)
            if instance is not None:
                instances.append(instance)
        return instances

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    def get_id(self) -> Optional[int]:
        return self._post.id

    def get_post(self) -> PostRecord:
        """The backing record."""
        return self._post

    def get_title(self) -> Optional[str]:
        return self._post.title

    def set_title(self, title: Optional[str]) -> "Post":
        self._post.title = title
        return self

    def get_slug(self) -> Optional[str]:
        return self._post.slug

    def set_slug(self, slug: Optional[str]) -> "Post":
        self._post.slug = slug
        return self

    def get_content(self) -> Optional[str]:
        return self._post.content

    def set_content(self, content: Optional[str]) -> "Post":
        self._post.content = content
        return self

    def get_excerpt(self) -> Optional[str]:
        return self._post.excerpt

    def set_excerpt(self, excerpt: Optional[str]) -> "Post":
        self._post.excerpt = excerpt
        return self

    def get_status(self) -> Optional[str]:
        return self._post.status or None

    def set_status(self, status: Optional[str]) -> "Post":
        self._post.status = status
        return self

    def get_author_id(self) -> Optional[int]:
        return self._post.author_id or None

    def set_author(self, user_id: Optional[int]) -> "Post":
        self._post.author_id = user_id
        return self

    def get_parent_id(self) -> Optional[int]:
        return self._post.parent_id or None

    def get_post_parent(self) -> Optional[int]:
        return self.get_parent_id()

    def set_parent(self, parent_id: Optional[int]) -> "Post":
        self._post.parent_id = parent_id
        return self

    def get_menu_order(self) -> Optional[int]:
        return self._post.menu_order

    def set_menu_order(self, order: Optional[int]) -> "Post":
        self._post.menu_order = order
        return self

    def get_created_date(self) -> Optional[datetime]:
        return self._post.date

    def get_modified_date(self) -> Optional[datetime]:
        return self._post.modified

    # ------------------------------------------------------------------
    # Host pass-throughs
    # ------------------------------------------------------------------

    def get_post_meta(self, name: str, single: bool = True) -> Any:
        return self.get_host().get_post_meta(self.get_id(), name, single)

    def get_all_post_meta(self) -> Dict[str, List[Any]]:
        """Every meta key of the post with all of its values."""
        return self.get_host().get_post_meta(self.get_id())

    def set_post_meta(self, name: str, value: Any) -> "Post":
        self.get_host().update_post_meta(self.get_id(), name, value)
        return self

    def delete_post_meta(self, name: str) -> "Post":
        self.get_host().delete_post_meta(self.get_id(), name)
        return self

    def get_tags(self, **args: Any) -> List[Tag]:
        return self.get_host().get_post_tags(self.get_id(), **args)

    def set_tags(self, tags: Union[str, Sequence[str]]) -> Optional[List[int]]:
        """
        Replace the post's tags.

        Args:
            tags: Comma-separated names or a sequence of names

        Returns:
            IDs of the attached tags, or None on failure
        """
        return self.get_host().set_post_tags(self.get_id(), parse_tag_list(tags), append=False)

    def get_thumbnail_id(self) -> Optional[int]:
        return self.get_host().get_post_thumbnail_id(self.get_id())

    def set_thumbnail(self, thumbnail_id: int) -> "Post":
        self.get_host().set_post_thumbnail(self.get_id(), thumbnail_id)
        return self

    def get_thumbnail_url(self, size: str = "thumbnail") -> Optional[str]:
        return self.get_host().get_thumbnail_url(self.get_id(), size)

    def get_permalink(self) -> Optional[str]:
        return self.get_host().get_permalink(self.get_id())

    def get_author(self) -> Optional[Author]:
        author_id = self.get_author_id()
        if not author_id:
            return None
        return self.get_host().get_user(author_id)

    def get_author_email(self) -> Optional[str]:
        author = self.get_author()
        return author.email if author else None

    def get_author_display_name(self) -> Optional[str]:
        author = self.get_author()
        return author.display_name if author else None

    def get_author_login(self) -> Optional[str]:
        author = self.get_author()
        return author.login if author else None

    def format_created_date(self) -> Optional[str]:
        """Creation date rendered with the site's date_format option."""
        return self._format_date(self._post.date)

    def format_modified_date(self) -> Optional[str]:
        """Modification date rendered with the site's date_format option."""
        return self._format_date(self._post.modified)

    def _format_date(self, value: Optional[datetime]) -> Optional[str]:
        if value is None:
            return None
        fmt = self.get_host().get_option("date_format") or settings.DEFAULT_DATE_FORMAT
        return format_php_date(value, fmt)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> Optional[int]:
        """
        Write the record to the host.

        Inserts unsaved posts and updates saved ones. The host does all
        validation.

        Returns:
            The post ID, or None if the host rejected the write
        """
        host = self.get_host()
        self._post.post_type = self.POST_TYPE
        post_id = self.get_id()

        if post_id:
            try:
                return host.update_post(self._post)
            except (PostWriteException, PostNotFoundException) as e:
                logger.warning(
                    "post_update_failed",
                    post_id=post_id,
                    post_type=self.POST_TYPE,
                    error=e.message,
                )
                return None

        try:
            new_id = host.insert_post(self._post)
        except PostWriteException as e:
            logger.warning("post_insert_failed", post_type=self.POST_TYPE, error=e.message)
            return None

        self._post = host.get_post(new_id) or replace(self._post, id=new_id)
        get_instance_cache().promote(type(self), self, new_id)
        logger.debug("post_created", post_id=new_id, post_type=self.POST_TYPE)
        return new_id

    def delete(self, force: bool = False) -> Optional[PostRecord]:
        """
        Trash or delete the post and drop it from the identity map.

        Args:
            force: Delete permanently instead of moving to the trash

        Returns:
            The host's result: the removed record, or None

        Raises:
            PostWriteException: If the host rejected the deletion; the
                instance is dropped from the identity map either way
        """
        post_id = self.get_id()
        cache = get_instance_cache()
        try:
            return self.get_host().delete_post(post_id, force)
        finally:
            cache.evict(type(self), post_id)
            cache.discard_new(type(self), self)

    def clone(self, with_meta: bool = False) -> "Post":
        """
        Save a copy of the post.

        Copies the title (suffixed with "-(Clone)"), content, parent,
        author, excerpt and featured image.

        Args:
            with_meta: Also copy every meta key; single values are copied
                as scalars, multiple values as a list

        Returns:
            The new instance
        """
        copy = self.new_instance()
        (
            copy.set_title(f"{self.get_title() or ''}{CLONE_TITLE_SUFFIX}")
            .set_content(self.get_content())
            .set_parent(self.get_parent_id())
            .set_author(self.get_author_id())
            .set_excerpt(self.get_excerpt())
            .save()
        )

        thumbnail_id = self.get_thumbnail_id()
        if thumbnail_id:
            copy.set_thumbnail(thumbnail_id)

        if with_meta:
            for key, values in self.get_all_post_meta().items():
                value = values[0] if len(values) == 1 else values
                copy.set_post_meta(key, value)

        return copy
