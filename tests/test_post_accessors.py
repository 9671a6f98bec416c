"""
Tests for Post field accessors and host pass-throughs.
"""

from datetime import datetime
from unittest.mock import MagicMock

import pytest

from wppost.domain.entities import Author, PostRecord

from conftest import SITE_URL


class TestFieldAccessors:
    """Test getters and fluent setters."""

    def test_blank_instance_reads_none(self, article_class):
        """Test unset fields read as None."""
        article = article_class.new_instance()

        assert article.get_id() is None
        assert article.get_title() is None
        assert article.get_slug() is None
        assert article.get_content() is None
        assert article.get_excerpt() is None
        assert article.get_status() is None
        assert article.get_author_id() is None
        assert article.get_parent_id() is None
        assert article.get_menu_order() is None
        assert article.get_created_date() is None
        assert article.get_modified_date() is None

    def test_setters_chain(self, article_class):
        """Test every setter returns the instance."""
        article = article_class.new_instance()

        result = (
            article.set_title("Title")
            .set_slug("title")
            .set_content("Body")
            .set_excerpt("Short")
            .set_status("publish")
            .set_author(3)
            .set_parent(9)
            .set_menu_order(2)
        )

        assert result is article
        assert article.get_title() == "Title"
        assert article.get_slug() == "title"
        assert article.get_content() == "Body"
        assert article.get_excerpt() == "Short"
        assert article.get_status() == "publish"
        assert article.get_author_id() == 3
        assert article.get_parent_id() == 9
        assert article.get_post_parent() == 9
        assert article.get_menu_order() == 2

    def test_setters_do_not_touch_host(self, article_class):
        """Test writes stay in memory until save."""
        host = MagicMock()
        article_class.bind(host)
        article = article_class.new_instance()

        article.set_title("Title").set_content("Body")

        assert host.method_calls == []

    def test_empty_values_are_absent(self, article_class):
        """Test status, author and parent treat empty values as unset."""
        article = article_class.new_instance(status="", author_id=0, parent_id=0)

        assert article.get_status() is None
        assert article.get_author_id() is None
        assert article.get_parent_id() is None

    def test_empty_strings_are_kept(self, article_class):
        """Test text fields only treat None as unset."""
        article = article_class.new_instance(title="", content="")

        assert article.get_title() == ""
        assert article.get_content() == ""

    def test_dates(self, published_article):
        """Test created and modified dates come back as datetimes."""
        assert published_article.get_created_date() == datetime(2024, 3, 1, 14, 5)
        assert isinstance(published_article.get_modified_date(), datetime)

    def test_repr(self, article_class):
        """Test repr names class, ID and title."""
        article = article_class.new_instance(title="Hi")

        assert repr(article) == "<Article id=None title='Hi'>"


class TestMeta:
    """Test meta pass-through."""

    def test_set_and_get(self, published_article):
        """Test a meta value round trip."""
        assert published_article.set_post_meta("color", "blue") is published_article

        assert published_article.get_post_meta("color") == "blue"
        assert published_article.get_post_meta("color", single=False) == ["blue"]

    def test_missing_key(self, published_article):
        """Test missing meta reads as None or an empty list."""
        assert published_article.get_post_meta("missing") is None
        assert published_article.get_post_meta("missing", single=False) == []

    def test_scalars_are_stored_as_strings(self, published_article):
        """Test numbers come back as strings like in WordPress."""
        published_article.set_post_meta("views", 42)

        assert published_article.get_post_meta("views") == "42"

    def test_arrays_round_trip(self, published_article):
        """Test lists and dicts are serialized."""
        published_article.set_post_meta("gallery", [3, 4, 5])
        published_article.set_post_meta("layout", {"columns": 2, "wide": True})

        assert published_article.get_post_meta("gallery") == [3, 4, 5]
        assert published_article.get_post_meta("layout") == {"columns": 2, "wide": True}

    def test_set_replaces_value(self, published_article):
        """Test setting a key twice keeps only the last value."""
        published_article.set_post_meta("color", "blue").set_post_meta("color", "red")

        assert published_article.get_post_meta("color", single=False) == ["red"]

    def test_all_meta(self, published_article):
        """Test every key is returned with its values."""
        published_article.set_post_meta("a", "1").set_post_meta("b", "2")

        assert published_article.get_all_post_meta() == {"a": ["1"], "b": ["2"]}

    def test_delete(self, published_article):
        """Test removing a key."""
        published_article.set_post_meta("color", "blue")

        assert published_article.delete_post_meta("color") is published_article
        assert published_article.get_post_meta("color") is None

    def test_unsaved_post_has_no_meta(self, article_class):
        """Test meta calls on an unsaved post are harmless."""
        article = article_class.new_instance()

        article.set_post_meta("color", "blue")

        assert article.get_post_meta("color") is None
        assert article.get_all_post_meta() == {}


class TestTags:
    """Test tag pass-through."""

    def test_set_tags_from_string(self, published_article):
        """Test comma-separated names are trimmed."""
        term_ids = published_article.set_tags(" news , python,")

        tags = published_article.get_tags()
        assert len(term_ids) == 2
        assert [tag.name for tag in tags] == ["news", "python"]
        assert [tag.slug for tag in tags] == ["news", "python"]

    def test_set_tags_replaces(self, published_article):
        """Test setting tags drops the old ones."""
        published_article.set_tags(["news", "python"])
        published_article.set_tags(["release"])

        assert [tag.name for tag in published_article.get_tags()] == ["release"]

    def test_tags_are_reused(self, host, published_article, article_class):
        """Test two posts share the same term."""
        other = article_class.new_instance(title="Other", status="publish")
        other.save()

        first = published_article.set_tags("news")
        second = other.set_tags("News")

        assert first == second

    def test_tag_order(self, published_article):
        """Test tags can be ordered descending."""
        published_article.set_tags("alpha, beta, gamma")

        tags = published_article.get_tags(order="DESC")

        assert [tag.name for tag in tags] == ["gamma", "beta", "alpha"]

    def test_unsaved_post(self, article_class):
        """Test tag writes on an unsaved post fail with None."""
        article = article_class.new_instance()

        assert article.set_tags("news") is None
        assert article.get_tags() == []

    def test_set_tags_passes_names(self, article_class):
        """Test tags reach the host as a stripped list."""
        host = MagicMock()
        host.set_post_tags.return_value = [1, 2]
        article_class.bind(host)
        article = article_class.get_instance(PostRecord(id=5, post_type="post"))

        assert article.set_tags("a, b") == [1, 2]
        host.set_post_tags.assert_called_once_with(5, ["a", "b"], append=False)


class TestThumbnails:
    """Test featured image pass-through."""

    def test_no_thumbnail(self, published_article):
        """Test posts without a featured image."""
        assert published_article.get_thumbnail_id() is None
        assert published_article.get_thumbnail_url() is None

    def test_set_thumbnail(self, published_article, attachment):
        """Test setting and reading the featured image."""
        assert published_article.set_thumbnail(attachment) is published_article

        assert published_article.get_thumbnail_id() == attachment
        assert published_article.get_post_meta("_thumbnail_id") == str(attachment)

    def test_thumbnail_url_sizes(self, published_article, attachment):
        """Test size-specific and full URLs."""
        published_article.set_thumbnail(attachment)
        uploads = f"{SITE_URL}/wp-content/uploads"

        assert published_article.get_thumbnail_url() == f"{uploads}/2024/03/sunset-150x150.jpg"
        assert published_article.get_thumbnail_url("full") == f"{uploads}/2024/03/sunset.jpg"
        assert published_article.get_thumbnail_url("large") == f"{uploads}/2024/03/sunset.jpg"

    def test_non_attachment_rejected(self, published_article, article_class):
        """Test only attachments can be featured images."""
        other = article_class.new_instance(title="Other", status="publish")
        other.save()

        published_article.set_thumbnail(other.get_id())

        assert published_article.get_thumbnail_id() is None


class TestPermalink:
    """Test permalinks."""

    def test_plain_permalink(self, published_article):
        """Test ?p= links without a permalink structure."""
        assert published_article.get_permalink() == f"{SITE_URL}/?p={published_article.get_id()}"

    def test_pretty_permalink(self, host, published_article):
        """Test the permalink structure is applied."""
        host.update_option("permalink_structure", "/%year%/%monthnum%/%postname%/")

        assert published_article.get_permalink() == f"{SITE_URL}/2024/03/hello-world/"

    def test_unsaved_post(self, article_class):
        """Test unsaved posts have no permalink."""
        assert article_class.new_instance().get_permalink() is None


class TestAuthor:
    """Test author lookups."""

    def test_author_details(self, published_article, author):
        """Test author fields come from the user record."""
        published_article.set_author(author)

        assert published_article.get_author() == Author(
            id=author, login="jdoe", email="jdoe@example.test", display_name="Jane Doe"
        )
        assert published_article.get_author_email() == "jdoe@example.test"
        assert published_article.get_author_display_name() == "Jane Doe"
        assert published_article.get_author_login() == "jdoe"

    def test_no_author(self, published_article):
        """Test posts without an author."""
        assert published_article.get_author() is None
        assert published_article.get_author_email() is None
        assert published_article.get_author_display_name() is None
        assert published_article.get_author_login() is None

    def test_unknown_author(self, published_article):
        """Test an author ID without a user record."""
        published_article.set_author(404)

        assert published_article.get_author() is None
        assert published_article.get_author_login() is None


class TestDateFormatting:
    """Test dates rendered with the site's date format."""

    def test_site_format(self, published_article):
        """Test the date_format option is used."""
        assert published_article.format_created_date() == "March 1, 2024"

    def test_custom_format(self, host, published_article):
        """Test a changed option is picked up."""
        host.update_option("date_format", "Y-m-d")

        assert published_article.format_created_date() == "2024-03-01"

    def test_modified_date(self, published_article):
        """Test the modified date is formatted too."""
        expected = published_article.get_modified_date().strftime("%Y")

        assert published_article.format_modified_date().endswith(expected)

    def test_fallback_format(self, article_class):
        """Test the default format is used when the site has none."""
        host = MagicMock()
        host.get_option.return_value = None
        article_class.bind(host)
        article = article_class.get_instance(
            PostRecord(id=1, post_type="post", date=datetime(2024, 12, 25))
        )

        assert article.format_created_date() == "December 25, 2024"

    def test_unset_date(self, article_class):
        """Test unsaved posts have no formatted date."""
        assert article_class.new_instance().format_created_date() is None
