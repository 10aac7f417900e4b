# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""Unit tests for favicon discovery."""

import json
import logging

import pytest

from faviconkit.exceptions import ParseError, TransportError
from faviconkit.favicon.discovery import FaviconDiscovery
from faviconkit.models import Candidate, HttpResponse, SourceKind
from faviconkit.scrapers.markup_parser import SoupMarkupParser

SITE = "https://example.com/"
DEFAULT = Candidate(url="https://example.com/favicon.ico", source_kind=SourceKind.DEFAULT_ICO)


def test_links_then_default(fake_client, ok_response):
    """Test that page icons are resolved and the default favicon comes last."""
    html = """
    <html><head>
        <link rel="icon" href="/img/icon-32.png" sizes="32x32">
        <link rel="apple-touch-icon" href="apple.png">
    </head></html>
    """
    client = fake_client({SITE: ok_response(SITE, html)})

    candidates = FaviconDiscovery(client).discover(SITE)

    assert candidates == [
        Candidate(
            url="https://example.com/img/icon-32.png",
            size_hint=(32, 32),
            source_kind=SourceKind.LINK_ICON,
        ),
        Candidate(url="https://example.com/apple.png", source_kind=SourceKind.APPLE_TOUCH_ICON),
        DEFAULT,
    ]


def test_no_icon_links(fake_client, ok_response):
    """Test that a page without icons yields only the default candidate."""
    client = fake_client({SITE: ok_response(SITE, "<html><head></head></html>")})

    assert FaviconDiscovery(client).discover(SITE) == [DEFAULT]


@pytest.mark.parametrize(
    "page",
    [
        TransportError("connection refused"),
        HttpResponse(url=SITE, status_code=503),
        None,
    ],
    ids=["transport-error", "server-error", "not-found"],
)
def test_unreachable_site_yields_default(fake_client, page):
    """Test that a failing page fetch is not fatal."""
    client = fake_client({SITE: page} if page is not None else {})

    assert FaviconDiscovery(client).discover(SITE) == [DEFAULT]


def test_parse_error_yields_default(fake_client, ok_response, mocker, caplog):
    """Test that markup errors are logged and recovered."""
    caplog.set_level(logging.WARNING)
    parser = mocker.MagicMock(spec=SoupMarkupParser)
    parser.extract_icon_links.side_effect = ParseError("bad markup")
    client = fake_client({SITE: ok_response(SITE, "<html>")})

    candidates = FaviconDiscovery(client, parser=parser).discover(SITE)

    assert candidates == [DEFAULT]
    assert "bad markup" in caplog.text


def test_unresolvable_links_are_dropped(fake_client, ok_response):
    """Test that data: and javascript: hrefs never become candidates."""
    html = """
    <head>
        <link rel="icon" href="data:image/png;base64,iVBORw0KGgo=">
        <link rel="icon" href="javascript:void(0)">
        <link rel="icon" href="/real.png">
    </head>
    """
    client = fake_client({SITE: ok_response(SITE, html)})

    candidates = FaviconDiscovery(client).discover(SITE)

    assert [candidate.url for candidate in candidates] == [
        "https://example.com/real.png",
        "https://example.com/favicon.ico",
    ]


def test_links_resolve_against_final_url(fake_client, ok_response):
    """Test that relative hrefs resolve against the page URL after redirects."""
    html = '<head><link rel="icon" href="icon.png"></head>'
    client = fake_client({SITE: ok_response("https://www.example.com/home/", html)})

    candidates = FaviconDiscovery(client).discover(SITE)

    assert candidates[0].url == "https://www.example.com/home/icon.png"
    # The default candidate stays on the requested site
    assert candidates[-1] == DEFAULT


def test_duplicate_links_are_collapsed(fake_client, ok_response):
    """Test that the same URL is only listed once, keeping the first occurrence."""
    html = """
    <head>
        <link rel="icon" href="/icon.png" sizes="32x32">
        <link rel="shortcut icon" href="https://example.com/icon.png">
    </head>
    """
    client = fake_client({SITE: ok_response(SITE, html)})

    candidates = FaviconDiscovery(client).discover(SITE)

    assert len(candidates) == 2
    assert candidates[0].size_hint == (32, 32)


def test_max_candidates(fake_client, ok_response):
    """Test that page candidates are capped, the default is always added."""
    html = "".join(f'<link rel="icon" href="/icon{i}.png">' for i in range(10))
    client = fake_client({SITE: ok_response(SITE, html)})

    candidates = FaviconDiscovery(client, max_candidates=3).discover(SITE)

    assert [candidate.url for candidate in candidates] == [
        "https://example.com/icon0.png",
        "https://example.com/icon1.png",
        "https://example.com/icon2.png",
        "https://example.com/favicon.ico",
    ]


class TestManifest:
    """Tests for icons declared in a web app manifest."""

    html = """
    <head>
        <link rel="icon" href="/favicon-16.png" sizes="16x16">
        <link rel="manifest" href="/static/site.webmanifest">
        <link rel="manifest" href="/ignored.webmanifest">
    </head>
    """
    manifest_url = "https://example.com/static/site.webmanifest"

    def test_manifest_icons(self, fake_client, ok_response):
        """Test that manifest icons resolve against the manifest URL."""
        manifest = json.dumps(
            {"icons": [{"src": "android-192.png", "sizes": "192x192"}, {"src": "/512.png"}]}
        )
        client = fake_client(
            {
                SITE: ok_response(SITE, self.html),
                self.manifest_url: ok_response(
                    self.manifest_url, manifest, "application/manifest+json"
                ),
            }
        )

        candidates = FaviconDiscovery(client, process_manifest=True).discover(SITE)

        assert candidates == [
            Candidate(
                url="https://example.com/favicon-16.png",
                size_hint=(16, 16),
                source_kind=SourceKind.LINK_ICON,
            ),
            Candidate(
                url="https://example.com/static/android-192.png",
                size_hint=(192, 192),
                source_kind=SourceKind.MANIFEST,
            ),
            Candidate(url="https://example.com/512.png", source_kind=SourceKind.MANIFEST),
            DEFAULT,
        ]
        # Only the first manifest is requested
        assert "https://example.com/ignored.webmanifest" not in client.requests

    @pytest.mark.parametrize(
        "manifest_response",
        [
            TransportError("timed out"),
            HttpResponse(url=manifest_url, status_code=404),
            HttpResponse(url=manifest_url, status_code=200, content=b"{not json"),
        ],
        ids=["transport-error", "not-found", "invalid-json"],
    )
    def test_manifest_failures_are_not_fatal(self, fake_client, ok_response, manifest_response):
        """Test that manifest errors only drop the manifest icons."""
        client = fake_client(
            {SITE: ok_response(SITE, self.html), self.manifest_url: manifest_response}
        )

        candidates = FaviconDiscovery(client, process_manifest=True).discover(SITE)

        assert [candidate.source_kind for candidate in candidates] == [
            SourceKind.LINK_ICON,
            SourceKind.DEFAULT_ICO,
        ]

    def test_manifest_processing_disabled(self, fake_client, ok_response):
        """Test that the manifest isn't requested when processing is disabled."""
        client = fake_client({SITE: ok_response(SITE, self.html)})

        FaviconDiscovery(client, process_manifest=False).discover(SITE)

        assert client.requests == [SITE]


def test_discovery_is_recomputed_per_call(fake_client, ok_response):
    """Test that every call fetches the page again and returns a new list."""
    client = fake_client({SITE: ok_response(SITE, '<link rel="icon" href="/a.png">')})
    discovery = FaviconDiscovery(client)

    first = discovery.discover(SITE)
    second = discovery.discover(SITE)

    assert first == second
    assert first is not second
    assert client.requests == [SITE, SITE]


def test_default_candidate_uses_site_root(fake_client):
    """Test that the default favicon lives at the root of the site."""
    candidates = FaviconDiscovery(fake_client()).discover("https://example.com/blog/post?id=1")

    assert candidates == [DEFAULT]
