"""
Database implementation of the content host.

Reads and writes the WordPress tables directly through SQLAlchemy,
following the rules wp_insert_post(), wp_update_post(), wp_delete_post()
and the meta and term APIs apply in WordPress core.
"""

import posixpath
import time
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Dict, Iterator, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import structlog
from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..domain.entities import Author, PostQuery, PostRecord, PostStatus, Tag
from ..domain.exceptions import (
    HostUnavailableException,
    PostNotFoundException,
    PostWriteException,
)
from ..helpers import sanitize_title
from ..models import (
    WPOption,
    WPPost,
    WPPostMeta,
    WPTerm,
    WPTermRelationship,
    WPTermTaxonomy,
    WPUser,
)
from ..serialization import maybe_serialize, maybe_unserialize
from .base import ContentHost

logger = structlog.get_logger(__name__)

TAG_TAXONOMY = "post_tag"
THUMBNAIL_META_KEY = "_thumbnail_id"
TRASH_STATUS_META_KEY = "_wp_trash_meta_status"
TRASH_TIME_META_KEY = "_wp_trash_meta_time"
TRASHED_SLUG_SUFFIX = "__trashed"

# Statuses that keep an empty slug until the post is published
UNSLUGGED_STATUSES = {"draft", "pending", "auto-draft"}
# Statuses linked by ID even when pretty permalinks are on
UNPUBLISHED_STATUSES = {"draft", "pending", "auto-draft", "future"}
# Types wp_delete_post() sends to the trash instead of deleting
TRASHABLE_TYPES = {"post", "page"}
# Types never matched by post_type=any
EXCLUDED_FROM_ANY = ("revision", "nav_menu_item")

ORDERBY_COLUMNS = {
    "date": WPPost.post_date,
    "post_date": WPPost.post_date,
    "modified": WPPost.post_modified,
    "post_modified": WPPost.post_modified,
    "title": WPPost.post_title,
    "post_title": WPPost.post_title,
    "name": WPPost.post_name,
    "post_name": WPPost.post_name,
    "menu_order": WPPost.menu_order,
    "ID": WPPost.ID,
    "id": WPPost.ID,
    "author": WPPost.post_author,
    "parent": WPPost.post_parent,
}

TAG_ORDER_COLUMNS = {
    "name": WPTerm.name,
    "slug": WPTerm.slug,
    "term_id": WPTerm.term_id,
    "id": WPTerm.term_id,
}


def _now() -> datetime:
    return datetime.now().replace(microsecond=0)


def _now_gmt() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)


def _to_utc(value: datetime, tz: tzinfo) -> datetime:
    """Naive UTC time of a site-local (or aware) datetime."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=tz)
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class DatabaseContentHost(ContentHost):
    """
    Content host backed by a WordPress database.

    Post type registrations live in memory on the host, exactly as
    register_post_type() keeps them for the length of a WordPress request.
    """

    name = "database"

    def __init__(self, session_factory: sessionmaker):
        """
        Initialize the host.

        Args:
            session_factory: Factory producing sessions bound to the WordPress database
        """
        self.session_factory = session_factory
        self.post_types: Dict[str, Dict[str, Any]] = {}

    @contextmanager
    def _read_session(self) -> Iterator[Session]:
        with self.session_factory() as session:
            try:
                yield session
            except SQLAlchemyError as e:
                logger.error("database_read_failed", error=str(e))
                raise HostUnavailableException(self.name, str(e)) from e

    @contextmanager
    def _write_session(self, operation: str) -> Iterator[Session]:
        with self.session_factory() as session:
            try:
                yield session
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                logger.error("database_write_failed", operation=operation, error=str(e))
                raise PostWriteException(operation, str(e)) from e

    # ------------------------------------------------------------------
    # Posts
    # ------------------------------------------------------------------

    def get_post(self, post_id: Optional[int]) -> Optional[PostRecord]:
        if not post_id:
            return None
        with self._read_session() as session:
            row = session.get(WPPost, int(post_id))
            return self._map_to_record(row) if row else None

    def query_posts(self, query: PostQuery) -> List[PostRecord]:
        stmt = select(WPPost)

        post_types = query.post_types()
        if post_types is None:
            stmt = stmt.where(WPPost.post_type.not_in(EXCLUDED_FROM_ANY))
        else:
            stmt = stmt.where(WPPost.post_type.in_(post_types))

        statuses = query.statuses()
        if statuses is None:
            stmt = stmt.where(
                WPPost.post_status.not_in([PostStatus.TRASH.value, PostStatus.AUTO_DRAFT.value])
            )
        else:
            stmt = stmt.where(WPPost.post_status.in_(statuses))

        if query.name is not None:
            stmt = stmt.where(WPPost.post_name == query.name)
        if query.p is not None:
            stmt = stmt.where(WPPost.ID == query.p)
        if query.post__in is not None:
            stmt = stmt.where(WPPost.ID.in_(query.post__in))
        if query.post_parent is not None:
            stmt = stmt.where(WPPost.post_parent == query.post_parent)
        if query.author is not None:
            stmt = stmt.where(WPPost.post_author == query.author)
        if query.s:
            pattern = f"%{query.s}%"
            stmt = stmt.where(
                or_(
                    WPPost.post_title.like(pattern),
                    WPPost.post_content.like(pattern),
                    WPPost.post_excerpt.like(pattern),
                )
            )
        if query.tag:
            slugs = [slug.strip() for slug in query.tag.split(",") if slug.strip()]
            tagged = (
                select(WPTermRelationship.object_id)
                .join(
                    WPTermTaxonomy,
                    WPTermTaxonomy.term_taxonomy_id == WPTermRelationship.term_taxonomy_id,
                )
                .join(WPTerm, WPTerm.term_id == WPTermTaxonomy.term_id)
                .where(WPTermTaxonomy.taxonomy == TAG_TAXONOMY, WPTerm.slug.in_(slugs))
            )
            stmt = stmt.where(WPPost.ID.in_(tagged))
        if query.meta_key is not None:
            meta = select(WPPostMeta.meta_id).where(
                WPPostMeta.post_id == WPPost.ID, WPPostMeta.meta_key == query.meta_key
            )
            if query.meta_value is not None:
                meta = meta.where(WPPostMeta.meta_value == maybe_serialize(query.meta_value))
            stmt = stmt.where(meta.exists())

        ignored = query.extra_criteria()
        if ignored:
            logger.debug("query_criteria_ignored", criteria=sorted(ignored))

        descending = query.order == "DESC"
        by_post_in = query.orderby == "post__in" and query.post__in
        if not by_post_in:
            for column in self._order_columns(query.orderby):
                stmt = stmt.order_by(column.desc() if descending else column.asc())
            stmt = stmt.order_by(WPPost.ID.desc() if descending else WPPost.ID.asc())

        limit = None if query.posts_per_page < 0 else query.posts_per_page
        offset = 0
        if limit is not None:
            offset = query.offset if query.offset is not None else (query.paged - 1) * limit

        with self._read_session() as session:
            if by_post_in:
                rows = list(session.scalars(stmt))
                position = {post_id: index for index, post_id in enumerate(query.post__in)}
                rows.sort(key=lambda row: position.get(row.ID, len(position)))
                rows = rows[offset:] if limit is None else rows[offset:offset + limit]
            else:
                if limit is not None:
                    stmt = stmt.limit(limit).offset(offset)
                rows = list(session.scalars(stmt))
            return [self._map_to_record(row) for row in rows]

    def insert_post(self, record: PostRecord) -> int:
        self._check_not_empty(record, "insert")

        now, now_gmt = _now(), _now_gmt()
        status = record.status or PostStatus.DRAFT.value
        post_type = record.post_type or "post"

        with self._write_session("insert") as session:
            date_gmt = (
                _to_utc(record.date, self._site_timezone(session)) if record.date else now_gmt
            )
            row = WPPost(
                post_author=record.author_id or 0,
                post_date=record.date or now,
                post_date_gmt=date_gmt,
                post_content=record.content or "",
                post_title=record.title or "",
                post_excerpt=record.excerpt or "",
                post_status=status,
                post_name="",
                post_modified=now,
                post_modified_gmt=now_gmt,
                post_parent=record.parent_id or 0,
                menu_order=record.menu_order or 0,
                post_type=post_type,
            )
            session.add(row)
            session.flush()

            row.post_name = self._resolve_slug(session, row, record.slug)
            row.guid = f"{self._home_url(session)}/?p={row.ID}"
            post_id = row.ID

        logger.info("post_inserted", post_id=post_id, post_type=post_type, status=status)
        return post_id

    def update_post(self, record: PostRecord) -> int:
        if not record.id:
            raise PostNotFoundException(record.id, record.post_type)

        with self._write_session("update") as session:
            row = session.get(WPPost, int(record.id))
            if row is None:
                raise PostNotFoundException(record.id, record.post_type)

            changes = record.to_mapping()
            changes.pop("ID", None)
            changes.pop("post_modified", None)
            for column, value in changes.items():
                if column == "post_name":
                    continue
                setattr(row, column, value)
            if record.date is not None:
                row.post_date_gmt = _to_utc(record.date, self._site_timezone(session))

            self._check_not_empty(self._map_to_record(row), "update")

            requested_slug = record.slug if record.slug is not None else row.post_name
            row.post_name = self._resolve_slug(session, row, requested_slug)
            row.post_modified = _now()
            row.post_modified_gmt = _now_gmt()
            post_id = row.ID

        logger.info("post_updated", post_id=post_id, post_type=record.post_type)
        return post_id

    def delete_post(self, post_id: Optional[int], force: bool = False) -> Optional[PostRecord]:
        if not post_id:
            return None

        with self._write_session("delete") as session:
            row = session.get(WPPost, int(post_id))
            if row is None:
                return None

            if (
                not force
                and row.post_type in TRASHABLE_TYPES
                and row.post_status != PostStatus.TRASH.value
            ):
                self._trash(session, row)
                logger.info("post_trashed", post_id=row.ID, post_type=row.post_type)
                return self._map_to_record(row)

            record = self._map_to_record(row)
            self._remove_term_relationships(session, row.ID)
            session.execute(delete(WPPostMeta).where(WPPostMeta.post_id == row.ID))
            # Children move up to the deleted post's parent
            for child in session.scalars(select(WPPost).where(WPPost.post_parent == row.ID)):
                child.post_parent = row.post_parent
            session.delete(row)

        logger.info("post_deleted", post_id=record.id, post_type=record.post_type)
        return record

    def _trash(self, session: Session, row: WPPost) -> None:
        self._set_meta(session, row.ID, TRASH_STATUS_META_KEY, row.post_status)
        self._set_meta(session, row.ID, TRASH_TIME_META_KEY, int(time.time()))
        row.post_status = PostStatus.TRASH.value
        if row.post_name and not row.post_name.endswith(TRASHED_SLUG_SUFFIX):
            row.post_name = f"{row.post_name}{TRASHED_SLUG_SUFFIX}"

    @staticmethod
    def _check_not_empty(record: PostRecord, operation: str) -> None:
        if record.post_type == "attachment":
            return
        if not (record.title or record.content or record.excerpt):
            raise PostWriteException(operation, "Content, title, and excerpt are empty.")

    @staticmethod
    def _order_columns(orderby: str) -> List[Any]:
        columns = [ORDERBY_COLUMNS[key] for key in orderby.split() if key in ORDERBY_COLUMNS]
        return columns or [WPPost.post_date]

    def _resolve_slug(self, session: Session, row: WPPost, requested: Optional[str]) -> str:
        """Sanitize the slug and make it unique within the post type."""
        slug = sanitize_title(requested) if requested else ""
        if not slug:
            if row.post_status in UNSLUGGED_STATUSES:
                return ""
            slug = sanitize_title(row.post_title) or str(row.ID)
        if row.post_status in UNSLUGGED_STATUSES:
            return slug

        candidate, suffix = slug, 2
        while session.scalar(
            select(func.count(WPPost.ID)).where(
                WPPost.post_type == row.post_type,
                WPPost.post_name == candidate,
                WPPost.ID != row.ID,
            )
        ):
            candidate = f"{slug}-{suffix}"
            suffix += 1
        return candidate

    @staticmethod
    def _map_to_record(row: WPPost) -> PostRecord:
        """Map database model to domain record."""
        return PostRecord(
            id=row.ID,
            post_type=row.post_type,
            title=row.post_title,
            slug=row.post_name,
            content=row.post_content,
            excerpt=row.post_excerpt,
            status=row.post_status,
            author_id=row.post_author,
            parent_id=row.post_parent,
            menu_order=row.menu_order,
            date=row.post_date,
            modified=row.post_modified,
        )

    # ------------------------------------------------------------------
    # Meta
    # ------------------------------------------------------------------

    def get_post_meta(
        self, post_id: Optional[int], key: Optional[str] = None, single: bool = True
    ) -> Any:
        if not post_id:
            if key is None:
                return {}
            return None if single else []

        stmt = select(WPPostMeta).where(WPPostMeta.post_id == int(post_id))
        if key is not None:
            stmt = stmt.where(WPPostMeta.meta_key == key)
        stmt = stmt.order_by(WPPostMeta.meta_id)

        with self._read_session() as session:
            rows = list(session.scalars(stmt))

        if key is None:
            grouped: Dict[str, List[Any]] = {}
            for row in rows:
                grouped.setdefault(row.meta_key, []).append(maybe_unserialize(row.meta_value))
            return grouped

        values = [maybe_unserialize(row.meta_value) for row in rows]
        if single:
            return values[0] if values else None
        return values

    def update_post_meta(self, post_id: Optional[int], key: str, value: Any) -> bool:
        if not post_id or not key:
            return False
        with self._write_session("update_meta") as session:
            self._set_meta(session, int(post_id), key, value)
        return True

    def delete_post_meta(self, post_id: Optional[int], key: str) -> bool:
        if not post_id or not key:
            return False
        with self._write_session("delete_meta") as session:
            result = session.execute(
                delete(WPPostMeta).where(
                    WPPostMeta.post_id == int(post_id), WPPostMeta.meta_key == key
                )
            )
            return bool(result.rowcount)

    @staticmethod
    def _set_meta(session: Session, post_id: int, key: str, value: Any) -> None:
        session.execute(
            delete(WPPostMeta).where(WPPostMeta.post_id == post_id, WPPostMeta.meta_key == key)
        )
        session.add(WPPostMeta(post_id=post_id, meta_key=key, meta_value=maybe_serialize(value)))

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def get_post_tags(self, post_id: Optional[int], **args: Any) -> List[Tag]:
        if not post_id:
            return []

        column = TAG_ORDER_COLUMNS.get(str(args.get("orderby", "name")), WPTerm.name)
        descending = str(args.get("order", "ASC")).upper() == "DESC"

        stmt = (
            select(WPTerm)
            .join(WPTermTaxonomy, WPTermTaxonomy.term_id == WPTerm.term_id)
            .join(
                WPTermRelationship,
                WPTermRelationship.term_taxonomy_id == WPTermTaxonomy.term_taxonomy_id,
            )
            .where(
                WPTermRelationship.object_id == int(post_id),
                WPTermTaxonomy.taxonomy == TAG_TAXONOMY,
            )
            .order_by(column.desc() if descending else column.asc())
        )
        with self._read_session() as session:
            return [
                Tag(id=term.term_id, name=term.name, slug=term.slug)
                for term in session.scalars(stmt)
            ]

    def set_post_tags(
        self, post_id: Optional[int], tags: List[str], append: bool = False
    ) -> Optional[List[int]]:
        if not post_id:
            return None

        with self._write_session("set_tags") as session:
            if session.get(WPPost, int(post_id)) is None:
                return None

            wanted: List[WPTermTaxonomy] = []
            for name in tags:
                taxonomy = self._ensure_tag(session, name)
                if all(t.term_taxonomy_id != taxonomy.term_taxonomy_id for t in wanted):
                    wanted.append(taxonomy)
            wanted_ids = {t.term_taxonomy_id for t in wanted}

            current = self._tag_relationships(session, int(post_id))
            touched = set(wanted_ids)
            if not append:
                for relationship in current:
                    if relationship.term_taxonomy_id not in wanted_ids:
                        touched.add(relationship.term_taxonomy_id)
                        session.delete(relationship)
            existing_ids = {r.term_taxonomy_id for r in current}
            for taxonomy in wanted:
                if taxonomy.term_taxonomy_id not in existing_ids:
                    session.add(
                        WPTermRelationship(
                            object_id=int(post_id), term_taxonomy_id=taxonomy.term_taxonomy_id
                        )
                    )
            session.flush()
            self._update_term_counts(session, touched)
            term_ids = [t.term_id for t in wanted]

        logger.debug("post_tags_set", post_id=post_id, tags=term_ids, append=append)
        return term_ids

    def _ensure_tag(self, session: Session, name: str) -> WPTermTaxonomy:
        slug = sanitize_title(name)
        taxonomy = session.scalar(
            select(WPTermTaxonomy)
            .join(WPTerm, WPTerm.term_id == WPTermTaxonomy.term_id)
            .where(
                WPTermTaxonomy.taxonomy == TAG_TAXONOMY,
                or_(WPTerm.slug == slug, WPTerm.name == name),
            )
        )
        if taxonomy is not None:
            return taxonomy

        term = WPTerm(name=name, slug=slug or name)
        session.add(term)
        session.flush()
        taxonomy = WPTermTaxonomy(term_id=term.term_id, taxonomy=TAG_TAXONOMY, count=0)
        session.add(taxonomy)
        session.flush()
        logger.info("tag_created", term_id=term.term_id, name=name)
        return taxonomy

    @staticmethod
    def _tag_relationships(session: Session, post_id: int) -> List[WPTermRelationship]:
        return list(
            session.scalars(
                select(WPTermRelationship)
                .join(
                    WPTermTaxonomy,
                    WPTermTaxonomy.term_taxonomy_id == WPTermRelationship.term_taxonomy_id,
                )
                .where(
                    WPTermRelationship.object_id == post_id,
                    WPTermTaxonomy.taxonomy == TAG_TAXONOMY,
                )
            )
        )

    def _remove_term_relationships(self, session: Session, post_id: int) -> None:
        relationships = list(
            session.scalars(
                select(WPTermRelationship).where(WPTermRelationship.object_id == post_id)
            )
        )
        touched = {r.term_taxonomy_id for r in relationships}
        for relationship in relationships:
            session.delete(relationship)
        session.flush()
        self._update_term_counts(session, touched)

    @staticmethod
    def _update_term_counts(session: Session, term_taxonomy_ids: set) -> None:
        for term_taxonomy_id in term_taxonomy_ids:
            taxonomy = session.get(WPTermTaxonomy, term_taxonomy_id)
            if taxonomy is None:
                continue
            taxonomy.count = session.scalar(
                select(func.count())
                .select_from(WPTermRelationship)
                .where(WPTermRelationship.term_taxonomy_id == term_taxonomy_id)
            )

    # ------------------------------------------------------------------
    # Thumbnails and links
    # ------------------------------------------------------------------

    def get_post_thumbnail_id(self, post_id: Optional[int]) -> Optional[int]:
        value = self.get_post_meta(post_id, THUMBNAIL_META_KEY, single=True)
        try:
            return int(value) or None
        except (TypeError, ValueError):
            return None

    def set_post_thumbnail(self, post_id: Optional[int], thumbnail_id: int) -> bool:
        if not post_id or not thumbnail_id:
            return False
        with self._write_session("set_thumbnail") as session:
            post = session.get(WPPost, int(post_id))
            attachment = session.get(WPPost, int(thumbnail_id))
            if post is None or attachment is None or attachment.post_type != "attachment":
                logger.warning(
                    "thumbnail_rejected", post_id=post_id, thumbnail_id=thumbnail_id
                )
                return False
            self._set_meta(session, post.ID, THUMBNAIL_META_KEY, int(thumbnail_id))
        return True

    def get_thumbnail_url(self, post_id: Optional[int], size: str = "thumbnail") -> Optional[str]:
        thumbnail_id = self.get_post_thumbnail_id(post_id)
        if not thumbnail_id:
            return None

        attached_file = self.get_post_meta(thumbnail_id, "_wp_attached_file")
        if not attached_file:
            with self._read_session() as session:
                attachment = session.get(WPPost, thumbnail_id)
                return (attachment.guid or None) if attachment else None

        with self._read_session() as session:
            base_url = self._uploads_url(session)

        file_path = attached_file
        metadata = self.get_post_meta(thumbnail_id, "_wp_attachment_metadata")
        if size != "full" and isinstance(metadata, dict):
            sized = (metadata.get("sizes") or {}).get(size)
            if isinstance(sized, dict) and sized.get("file"):
                file_path = posixpath.join(posixpath.dirname(attached_file), sized["file"])
        return f"{base_url}/{file_path}"

    def get_permalink(self, post_id: Optional[int]) -> Optional[str]:
        if not post_id:
            return None
        with self._read_session() as session:
            row = session.get(WPPost, int(post_id))
            if row is None:
                return None
            home = self._home_url(session)
            structure = self._option(session, "permalink_structure") or ""

            if row.post_type == "attachment":
                return f"{home}/?attachment_id={row.ID}"
            if not structure or row.post_status in UNPUBLISHED_STATUSES or not row.post_name:
                return f"{home}/{self._plain_query(row)}"

            trailing = "/" if structure.endswith("/") else ""
            if row.post_type == "post":
                return home + self._expand_structure(session, row, structure)
            if row.post_type == "page":
                return f"{home}/{self._page_path(session, row)}{trailing}"

            rewrite = self.post_types.get(row.post_type, {}).get("rewrite") or {}
            base = rewrite.get("slug", row.post_type) if isinstance(rewrite, dict) else row.post_type
            return f"{home}/{base}/{row.post_name}{trailing}"

    @staticmethod
    def _plain_query(row: WPPost) -> str:
        if row.post_type == "post":
            return f"?p={row.ID}"
        if row.post_type == "page":
            return f"?page_id={row.ID}"
        return f"?post_type={row.post_type}&p={row.ID}"

    def _expand_structure(self, session: Session, row: WPPost, structure: str) -> str:
        date = row.post_date or _now()
        replacements = {
            "%year%": f"{date.year:04d}",
            "%monthnum%": f"{date.month:02d}",
            "%day%": f"{date.day:02d}",
            "%hour%": f"{date.hour:02d}",
            "%minute%": f"{date.minute:02d}",
            "%second%": f"{date.second:02d}",
            "%postname%": row.post_name,
            "%post_id%": str(row.ID),
            "%category%": "uncategorized",
        }
        if "%author%" in structure:
            author = session.get(WPUser, row.post_author) if row.post_author else None
            replacements["%author%"] = author.user_nicename if author else ""
        path = structure
        for tag, value in replacements.items():
            path = path.replace(tag, value)
        return path

    @staticmethod
    def _page_path(session: Session, row: WPPost) -> str:
        parts = [row.post_name]
        seen = {row.ID}
        parent_id = row.post_parent
        while parent_id and parent_id not in seen:
            parent = session.get(WPPost, parent_id)
            if parent is None:
                break
            parts.insert(0, parent.post_name)
            seen.add(parent.ID)
            parent_id = parent.post_parent
        return "/".join(parts)

    def _home_url(self, session: Session) -> str:
        home = self._option(session, "home") or self._option(session, "siteurl") or ""
        return str(home).rstrip("/")

    def _site_timezone(self, session: Session) -> tzinfo:
        """Site timezone from timezone_string, else the numeric gmt_offset."""
        name = self._option(session, "timezone_string")
        if name:
            try:
                return ZoneInfo(str(name))
            except (ZoneInfoNotFoundError, ValueError):
                logger.warning("unknown_site_timezone", timezone=name)
        try:
            offset = float(self._option(session, "gmt_offset") or 0)
        except (TypeError, ValueError):
            offset = 0.0
        return timezone(timedelta(hours=offset))

    def _uploads_url(self, session: Session) -> str:
        custom = self._option(session, "upload_url_path")
        if custom:
            return str(custom).rstrip("/")
        site = self._option(session, "siteurl") or self._home_url(session)
        return f"{str(site).rstrip('/')}/wp-content/uploads"

    # ------------------------------------------------------------------
    # Users, options, post types
    # ------------------------------------------------------------------

    def get_user(self, user_id: Optional[int]) -> Optional[Author]:
        if not user_id:
            return None
        with self._read_session() as session:
            user = session.get(WPUser, int(user_id))
            if user is None:
                return None
            return Author(
                id=user.ID,
                login=user.user_login,
                email=user.user_email,
                display_name=user.display_name,
            )

    def get_option(self, name: str, default: Any = None) -> Any:
        with self._read_session() as session:
            value = self._option(session, name)
        return default if value is None else value

    def update_option(self, name: str, value: Any) -> None:
        """Create or replace a site option."""
        with self._write_session("update_option") as session:
            option = session.scalar(select(WPOption).where(WPOption.option_name == name))
            if option is None:
                session.add(WPOption(option_name=name, option_value=maybe_serialize(value)))
            else:
                option.option_value = maybe_serialize(value)

    @staticmethod
    def _option(session: Session, name: str) -> Any:
        option = session.scalar(select(WPOption).where(WPOption.option_name == name))
        return maybe_unserialize(option.option_value) if option else None

    def register_post_type(self, post_type: str, options: Dict[str, Any]) -> None:
        self.post_types[post_type] = dict(options)
        logger.info("post_type_registered", post_type=post_type)

    def close(self) -> None:
        engine = self.session_factory.kw.get("bind")
        if engine is not None:
            engine.dispose()
