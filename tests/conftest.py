"""
Test configuration and fixtures
"""

from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from wppost.cache import get_instance_cache
from wppost.hosts import DatabaseContentHost, set_default_host
from wppost.models import Base, WPPost, WPUser
from wppost.post import Post

SITE_URL = "http://example.test"

# Create in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


class Article(Post):
    """Blog posts."""

    POST_TYPE = "post"


class Page(Post):
    """Static pages."""

    POST_TYPE = "page"


@pytest.fixture(scope="function")
def engine():
    """Fresh in-memory WordPress schema for each test"""
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@pytest.fixture(scope="function")
def host(session_factory):
    """Database host with the options a fresh install has"""
    host = DatabaseContentHost(session_factory)
    host.update_option("home", SITE_URL)
    host.update_option("siteurl", SITE_URL)
    host.update_option("date_format", "F j, Y")
    host.update_option("permalink_structure", "")
    return host


@pytest.fixture
def article_class(host):
    """Article bound to the test database"""
    Article.bind(host)
    yield Article
    Article.bind(None)


@pytest.fixture
def page_class(host):
    """Page bound to the test database"""
    Page.bind(host)
    yield Page
    Page.bind(None)


@pytest.fixture(autouse=True)
def clean_instance_cache():
    """Every test starts with an empty identity map and no default host"""
    cache = get_instance_cache()
    cache.clear()
    cache.hits = 0
    cache.misses = 0
    yield
    cache.clear()
    set_default_host(None)


@pytest.fixture
def author(session_factory):
    """A registered user"""
    with session_factory() as session:
        user = WPUser(
            user_login="jdoe",
            user_nicename="jdoe",
            user_email="jdoe@example.test",
            display_name="Jane Doe",
            user_registered=datetime(2024, 1, 1),
        )
        session.add(user)
        session.commit()
        return user.ID


@pytest.fixture
def attachment(session_factory, host):
    """An uploaded image with a thumbnail size"""
    with session_factory() as session:
        row = WPPost(
            post_title="sunset",
            post_name="sunset",
            post_status="inherit",
            post_type="attachment",
            post_mime_type="image/jpeg",
            guid=f"{SITE_URL}/wp-content/uploads/2024/03/sunset.jpg",
            post_date=datetime(2024, 3, 1),
            post_modified=datetime(2024, 3, 1),
        )
        session.add(row)
        session.commit()
        attachment_id = row.ID

    host.update_post_meta(attachment_id, "_wp_attached_file", "2024/03/sunset.jpg")
    host.update_post_meta(
        attachment_id,
        "_wp_attachment_metadata",
        {
            "width": 1200,
            "height": 800,
            "file": "2024/03/sunset.jpg",
            "sizes": {
                "thumbnail": {
                    "file": "sunset-150x150.jpg",
                    "width": 150,
                    "height": 150,
                    "mime-type": "image/jpeg",
                },
            },
        },
    )
    return attachment_id


@pytest.fixture
def published_article(article_class):
    """A published article saved through the model"""
    article = article_class.new_instance(
        title="Hello World",
        content="Welcome to WordPress.",
        excerpt="Welcome",
        status="publish",
        date=datetime(2024, 3, 1, 14, 5),
    )
    article.save()
    return article
