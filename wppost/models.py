"""
Database models for the WordPress schema.

SQLAlchemy ORM mappings of the core WordPress tables the post model reads
and writes. Column names and defaults follow wp-admin/includes/schema.php
so the mappings work against an existing WordPress database; table names
carry the configured table prefix.
"""

from typing import Any

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base

from .config import settings

Base: Any = declarative_base()

PREFIX = settings.DB_TABLE_PREFIX

# BIGINT UNSIGNED in MySQL; SQLite only autoincrements INTEGER primary keys
ID_TYPE = BigInteger().with_variant(Integer, "sqlite")


class WPPost(Base):
    """
    Row of the posts table.

    Attributes:
        ID: Primary key
        post_author: User ID of the author (0 when none)
        post_date: Local publication date
        post_content: Body
        post_title: Title
        post_excerpt: Manual excerpt
        post_status: Status (publish, draft, trash ...)
        post_name: Slug
        post_modified: Local date of the last change
        post_parent: Parent post ID (0 when none)
        guid: Globally unique URL; for attachments the file URL
        menu_order: Sort key for pages and menus
        post_type: Post type
    """

    __tablename__ = f"{PREFIX}posts"

    ID = Column(ID_TYPE, primary_key=True, autoincrement=True)
    post_author = Column(BigInteger, default=0, nullable=False)
    post_date = Column(DateTime, nullable=True)
    post_date_gmt = Column(DateTime, nullable=True)
    post_content = Column(Text, default="", nullable=False)
    post_title = Column(Text, default="", nullable=False)
    post_excerpt = Column(Text, default="", nullable=False)
    post_status = Column(String(20), default="publish", nullable=False)
    comment_status = Column(String(20), default="open", nullable=False)
    ping_status = Column(String(20), default="open", nullable=False)
    post_password = Column(String(255), default="", nullable=False)
    post_name = Column(String(200), default="", nullable=False)
    to_ping = Column(Text, default="", nullable=False)
    pinged = Column(Text, default="", nullable=False)
    post_modified = Column(DateTime, nullable=True)
    post_modified_gmt = Column(DateTime, nullable=True)
    post_content_filtered = Column(Text, default="", nullable=False)
    post_parent = Column(BigInteger, default=0, nullable=False)
    guid = Column(String(255), default="", nullable=False)
    menu_order = Column(Integer, default=0, nullable=False)
    post_type = Column(String(20), default="post", nullable=False)
    post_mime_type = Column(String(100), default="", nullable=False)
    comment_count = Column(BigInteger, default=0, nullable=False)

    __table_args__ = (
        Index("post_name", "post_name"),
        Index("type_status_date", "post_type", "post_status", "post_date", "ID"),
        Index("post_parent", "post_parent"),
        Index("post_author", "post_author"),
    )


class WPPostMeta(Base):
    """Row of the postmeta table; values are stored PHP-serialized."""

    __tablename__ = f"{PREFIX}postmeta"

    meta_id = Column(ID_TYPE, primary_key=True, autoincrement=True)
    post_id = Column(BigInteger, default=0, nullable=False, index=True)
    meta_key = Column(String(255), nullable=True, index=True)
    meta_value = Column(Text, nullable=True)


class WPUser(Base):
    """Row of the users table."""

    __tablename__ = f"{PREFIX}users"

    ID = Column(ID_TYPE, primary_key=True, autoincrement=True)
    user_login = Column(String(60), default="", nullable=False, index=True)
    user_pass = Column(String(255), default="", nullable=False)
    user_nicename = Column(String(50), default="", nullable=False)
    user_email = Column(String(100), default="", nullable=False)
    user_url = Column(String(100), default="", nullable=False)
    user_registered = Column(DateTime, nullable=True)
    user_activation_key = Column(String(255), default="", nullable=False)
    user_status = Column(Integer, default=0, nullable=False)
    display_name = Column(String(250), default="", nullable=False)


class WPOption(Base):
    """Row of the options table."""

    __tablename__ = f"{PREFIX}options"

    option_id = Column(ID_TYPE, primary_key=True, autoincrement=True)
    option_name = Column(String(191), default="", nullable=False, unique=True)
    option_value = Column(Text, default="", nullable=False)
    autoload = Column(String(20), default="yes", nullable=False)


class WPTerm(Base):
    """Row of the terms table."""

    __tablename__ = f"{PREFIX}terms"

    term_id = Column(ID_TYPE, primary_key=True, autoincrement=True)
    name = Column(String(200), default="", nullable=False)
    slug = Column(String(200), default="", nullable=False, index=True)
    term_group = Column(BigInteger, default=0, nullable=False)


class WPTermTaxonomy(Base):
    """Row of the term_taxonomy table, binding a term to a taxonomy."""

    __tablename__ = f"{PREFIX}term_taxonomy"

    term_taxonomy_id = Column(ID_TYPE, primary_key=True, autoincrement=True)
    term_id = Column(BigInteger, default=0, nullable=False)
    taxonomy = Column(String(32), default="", nullable=False)
    description = Column(Text, default="", nullable=False)
    parent = Column(BigInteger, default=0, nullable=False)
    count = Column(BigInteger, default=0, nullable=False)

    __table_args__ = (Index("term_id_taxonomy", "term_id", "taxonomy", unique=True),)


class WPTermRelationship(Base):
    """Row of the term_relationships table, attaching a term to a post."""

    __tablename__ = f"{PREFIX}term_relationships"

    object_id = Column(BigInteger, primary_key=True, default=0)
    term_taxonomy_id = Column(BigInteger, primary_key=True, default=0)
    term_order = Column(Integer, default=0, nullable=False)
