"""
Content host interface (Abstract Base Class).

Defines the contract between the Post model and the platform that actually
stores posts, independent of whether that platform is reached through its
database or its HTTP API.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..domain.entities import Author, PostQuery, PostRecord, Tag


class ContentHost(ABC):
    """
    Abstract interface for post storage operations.

    Every operation is synchronous and blocking. Write failures raise
    PostWriteException, transport failures HostUnavailableException.
    """

    name: str = "host"

    @abstractmethod
    def get_post(self, post_id: int) -> Optional[PostRecord]:
        """
        Fetch a post by ID.

        Args:
            post_id: Post ID

        Returns:
            The record, or None if it does not exist
        """
        pass

    @abstractmethod
    def query_posts(self, query: PostQuery) -> List[PostRecord]:
        """
        Find posts matching WP_Query style criteria.

        Args:
            query: Query criteria

        Returns:
            Matching records, ordered and paginated as requested
        """
        pass

    @abstractmethod
    def insert_post(self, record: PostRecord) -> int:
        """
        Create a post.

        Args:
            record: Record to store; its ID is ignored

        Returns:
            The ID assigned by the host
        """
        pass

    @abstractmethod
    def update_post(self, record: PostRecord) -> int:
        """
        Update an existing post from the fields set on the record.

        Args:
            record: Record carrying the post ID and the new values

        Returns:
            The post ID
        """
        pass

    @abstractmethod
    def delete_post(self, post_id: Optional[int], force: bool = False) -> Optional[PostRecord]:
        """
        Trash a post, or delete it permanently.

        Args:
            post_id: Post ID
            force: Skip the trash and delete permanently

        Returns:
            The trashed or deleted record, None when nothing was found
        """
        pass

    @abstractmethod
    def get_post_meta(
        self, post_id: Optional[int], key: Optional[str] = None, single: bool = True
    ) -> Any:
        """
        Read post meta.

        Args:
            post_id: Post ID
            key: Meta key; all keys when None
            single: Return only the first value of the key

        Returns:
            First value or None (single), list of values (not single),
            or {key: [values]} when no key is given
        """
        pass

    @abstractmethod
    def update_post_meta(self, post_id: Optional[int], key: str, value: Any) -> bool:
        """
        Replace every value of a meta key with a single value.

        Returns:
            True if the meta was written
        """
        pass

    @abstractmethod
    def delete_post_meta(self, post_id: Optional[int], key: str) -> bool:
        """
        Remove a meta key from a post.

        Returns:
            True if anything was removed
        """
        pass

    @abstractmethod
    def get_post_tags(self, post_id: Optional[int], **args: Any) -> List[Tag]:
        """
        Tags attached to a post.

        Args:
            post_id: Post ID
            **args: ``orderby`` (name, slug, term_id) and ``order`` (ASC, DESC)

        Returns:
            List of tags
        """
        pass

    @abstractmethod
    def set_post_tags(
        self, post_id: Optional[int], tags: List[str], append: bool = False
    ) -> Optional[List[int]]:
        """
        Attach tags to a post by name, creating missing tags.

        Args:
            post_id: Post ID
            tags: Tag names
            append: Keep existing tags instead of replacing them

        Returns:
            IDs of the tags now attached, or None on failure
        """
        pass

    @abstractmethod
    def get_post_thumbnail_id(self, post_id: Optional[int]) -> Optional[int]:
        """Attachment ID of the post's featured image, None if unset."""
        pass

    @abstractmethod
    def set_post_thumbnail(self, post_id: Optional[int], thumbnail_id: int) -> bool:
        """Set the featured image of a post."""
        pass

    @abstractmethod
    def get_thumbnail_url(self, post_id: Optional[int], size: str = "thumbnail") -> Optional[str]:
        """URL of the featured image in a registered size."""
        pass

    @abstractmethod
    def get_permalink(self, post_id: Optional[int]) -> Optional[str]:
        """Public URL of a post."""
        pass

    @abstractmethod
    def get_user(self, user_id: Optional[int]) -> Optional[Author]:
        """Look up a user."""
        pass

    @abstractmethod
    def get_option(self, name: str, default: Any = None) -> Any:
        """Read a site option."""
        pass

    @abstractmethod
    def register_post_type(self, post_type: str, options: Dict[str, Any]) -> None:
        """Make a post type known to the host."""
        pass

    def close(self) -> None:
        """Release connections held by the host."""

