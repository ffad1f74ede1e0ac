"""Tests for meeting link normalization."""

import pytest

from app.core.constants import MAX_MEETING_LINK_LENGTH
from app.core.exceptions import ValidationException
from app.services.session_generation.zoom_link import normalize_zoom_link


@pytest.mark.parametrize("raw", [None, "", "   ", "\t\n"])
def test_blank_means_no_link(raw):
    assert normalize_zoom_link(raw) is None


def test_https_link_is_kept():
    assert normalize_zoom_link("https://zoom.us/j/123?pwd=abc") == "https://zoom.us/j/123?pwd=abc"


def test_surrounding_whitespace_is_trimmed():
    assert normalize_zoom_link("  https://zoom.us/j/123  ") == "https://zoom.us/j/123"


def test_http_is_upgraded_to_https():
    assert normalize_zoom_link("http://meet.example.com/room") == "https://meet.example.com/room"


def test_uppercase_scheme_is_accepted():
    assert normalize_zoom_link("HTTPS://zoom.us/j/1") == "https://zoom.us/j/1"


@pytest.mark.parametrize(
    "raw, reason",
    [
        ("zoom.us/j/123", "scheme"),
        ("ftp://zoom.us/j/123", "scheme"),
        ("javascript:alert(1)", "scheme"),
        ("https:///j/123", "host"),
        ("https://zoom.us/j/1 23", "whitespace"),
        ("https://zoom.us/" + "a" * MAX_MEETING_LINK_LENGTH, "too_long"),
    ],
)
def test_invalid_links_are_rejected(raw, reason):
    with pytest.raises(ValidationException) as exc_info:
        normalize_zoom_link(raw)

    assert exc_info.value.message == "Invalid zoom link"
    assert exc_info.value.details == {"field": "zoomLink", "reason": reason}


class TestAllowedHosts:
    def test_exact_host_allowed(self):
        assert normalize_zoom_link("https://zoom.us/j/1", ["zoom.us"]) == "https://zoom.us/j/1"

    def test_subdomain_allowed(self):
        assert (
            normalize_zoom_link("https://us02web.zoom.us/j/1", ["zoom.us"])
            == "https://us02web.zoom.us/j/1"
        )

    def test_other_host_rejected(self):
        with pytest.raises(ValidationException) as exc_info:
            normalize_zoom_link("https://evilzoom.us/j/1", ["zoom.us"])

        assert exc_info.value.details["reason"] == "host_not_allowed"
