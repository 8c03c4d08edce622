"""Tests for URL normalization and field validators."""

import pytest

from sitegrid.core.exceptions import ValidationError
from sitegrid.core.models import ExtraLink
from sitegrid.core.validators import (
    ExtraLinkValidator,
    TagValidator,
    WebsiteValidator,
    get_domain,
    get_origin,
    is_valid_hex_color,
    is_valid_name,
    is_valid_url,
    normalize_url,
)


class TestNormalizeUrl:
    """URLs without a scheme get https."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("test.com", "https://test.com/"),
            ("  example.com/path  ", "https://example.com/path"),
            ("http://Example.COM", "http://example.com/"),
            ("HTTPS://GitHub.com/User", "https://github.com/User"),
            ("https://a.com/?q=1#top", "https://a.com/?q=1#top"),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_url(raw) == expected

    def test_empty_input(self):
        assert normalize_url("") == ""
        assert normalize_url(None) == ""
        assert normalize_url("   ") == ""

    def test_idempotent(self):
        once = normalize_url("test.com")
        assert normalize_url(once) == once


class TestIsValidUrl:
    @pytest.mark.parametrize(
        "url",
        ["https://github.com/", "http://localhost:8080/", "https://a.b.c/path?x=1"],
    )
    def test_valid(self, url):
        assert is_valid_url(url)

    @pytest.mark.parametrize(
        "url",
        [
            "",
            None,
            "ftp://files.example.com/",
            "https://",
            "https://exa mple.com/",
            "https://example.com:99999/",
            "javascript:alert(1)",
        ],
    )
    def test_invalid(self, url):
        assert not is_valid_url(url)


class TestUrlParts:
    def test_domain(self):
        assert get_domain("https://docs.python.org/3/") == "docs.python.org"
        assert get_domain("not a url") == ""
        assert get_domain(None) == ""

    def test_origin(self):
        assert get_origin("https://example.com:8443/a/b") == "https://example.com:8443"
        assert get_origin("") == ""


class TestSimpleChecks:
    def test_names(self):
        assert is_valid_name("GitHub")
        assert is_valid_name("  padded  ")
        assert not is_valid_name("   ")
        assert not is_valid_name("")
        assert not is_valid_name(None)
        assert is_valid_name("x" * 50)
        assert not is_valid_name("x" * 51)

    def test_hex_colors(self):
        assert is_valid_hex_color("#667eea")
        assert is_valid_hex_color("#FFFFFF")
        assert not is_valid_hex_color("667eea")
        assert not is_valid_hex_color("#fff")
        assert not is_valid_hex_color(None)


class TestWebsiteValidator:
    """Per-field website validation."""

    def test_valid_fields(self):
        validator = WebsiteValidator()
        assert validator.validate({"name": "GitHub", "url": "github.com"}) == {}

    def test_collects_every_problem(self):
        """All invalid fields are reported at once."""
        validator = WebsiteValidator()

        errors = validator.validate(
            {"name": " ", "url": "https://", "icon_zoom": 5.0, "icon_offset_x": -80}
        )

        assert set(errors) == {"name", "url", "icon_zoom", "icon_offset_x"}

    @pytest.mark.parametrize("url", [123, 4.5, ["a.com"]])
    def test_non_string_url(self, url):
        assert set(WebsiteValidator().validate({"url": url})) == {"url"}

    def test_only_present_fields_are_checked(self):
        validator = WebsiteValidator()
        assert validator.validate({"icon_zoom": 2.0}) == {}

    def test_icon_background_color(self):
        validator = WebsiteValidator()
        assert validator.validate({"icon_background_color": "transparent"}) == {}
        assert validator.validate({"icon_background_color": "#000000"}) == {}
        assert "icon_background_color" in validator.validate(
            {"icon_background_color": "black"}
        )

    def test_zoom_rejects_booleans(self):
        validator = WebsiteValidator()
        assert "icon_zoom" in validator.validate({"icon_zoom": True})

    def test_tag_references(self):
        """Unknown and repeated tag ids are rejected when tags are known."""
        validator = WebsiteValidator()
        known = {"t1", "t2"}

        assert validator.validate({"tag_ids": ("t1",)}, known) == {}
        assert "tag_ids" in validator.validate({"tag_ids": ("t3",)}, known)
        assert "tag_ids" in validator.validate({"tag_ids": ("t1", "t1")}, known)
        assert "category_id" in validator.validate({"category_id": "t9"}, known)
        assert validator.validate({"category_id": None}, known) == {}

    def test_check_raises(self):
        validator = WebsiteValidator()
        with pytest.raises(ValidationError) as exc_info:
            validator.check({"name": "", "url": "nope nope"})

        assert set(exc_info.value.errors) == {"name", "url"}


class TestExtraLinkValidator:
    """Extra link list rules."""

    def test_at_most_ten_links(self):
        links = [ExtraLink(name=f"Link {i}", url=f"https://a.com/{i}") for i in range(11)]
        errors = ExtraLinkValidator().validate(links)
        assert "extra_links" in errors

    def test_ten_links_allowed(self):
        links = [ExtraLink(name=f"Link {i}", url=f"https://a.com/{i}") for i in range(10)]
        assert ExtraLinkValidator().validate(links) == {}

    def test_names_unique_case_insensitive(self):
        links = [
            ExtraLink(name="Docs", url="https://a.com/docs"),
            ExtraLink(name="docs", url="https://a.com/other"),
        ]
        errors = ExtraLinkValidator().validate(links)
        assert "extra_links[1].name" in errors

    def test_link_fields(self):
        links = [ExtraLink(name="", url="not a url at all")]
        errors = ExtraLinkValidator().validate(links)
        assert "extra_links[0].name" in errors
        assert "extra_links[0].url" in errors


class TestTagValidator:
    def test_valid(self):
        assert TagValidator().validate({"name": "Work", "color": "#667eea"}) == {}

    def test_invalid(self):
        errors = TagValidator().validate({"name": "x" * 31, "color": "red"})
        assert set(errors) == {"name", "color"}
