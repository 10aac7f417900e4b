# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""Shared fixtures for faviconkit tests."""

import os
from io import BytesIO
from logging import LogRecord
from typing import Callable, Mapping, Optional

import pytest
from PIL import Image as PILImage

# Select the testing settings before faviconkit reads any configuration
os.environ.setdefault("FAVICONKIT_ENV", "testing")

from faviconkit.models import HttpResponse  # noqa: E402

FilterCaplogFixture = Callable[[list[LogRecord], str], list[LogRecord]]


@pytest.fixture(scope="session", name="filter_caplog")
def fixture_filter_caplog() -> FilterCaplogFixture:
    """
    Return a function that will filter pytest captured log records for a given logger
    name
    """

    def filter_caplog(records: list[LogRecord], logger_name: str) -> list[LogRecord]:
        """
        Filter pytest captured log records for a given logger name
        """
        return [record for record in records if record.name == logger_name]

    return filter_caplog


def render_image(
    image_format: str = "PNG",
    size: tuple[int, int] = (32, 32),
    color: tuple[int, ...] = (255, 0, 0, 255),
    mode: str = "RGBA",
) -> bytes:
    """Render a solid color image and return its encoded bytes."""
    image = PILImage.new(mode, size, color)
    buffer = BytesIO()
    save_kwargs = {"sizes": [size]} if image_format == "ICO" else {}
    image.save(buffer, format=image_format, **save_kwargs)
    return buffer.getvalue()


@pytest.fixture(name="make_image")
def fixture_make_image() -> Callable[..., bytes]:
    """Return a factory rendering solid color images in any Pillow format."""
    return render_image


class FakeClient:
    """In-memory `Client` answering from a URL to response (or exception) mapping.

    Unknown URLs answer HTTP 404. Every requested URL is recorded in `requests`.
    """

    def __init__(self, routes: Optional[Mapping[str, HttpResponse | Exception]] = None) -> None:
        self.routes = dict(routes or {})
        self.requests: list[str] = []
        self.request_headers: list[Mapping[str, str]] = []

    def get(
        self,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        self.requests.append(url)
        self.request_headers.append(dict(headers or {}))
        result = self.routes.get(url)
        if result is None:
            return HttpResponse(url=url, status_code=404)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture(name="ok_response")
def fixture_ok_response() -> Callable[..., HttpResponse]:
    """Return a factory of 200 responses."""

    def _create(url: str, content: bytes | str, content_type: str = "text/html") -> HttpResponse:
        body = content.encode() if isinstance(content, str) else content
        return HttpResponse(url=url, status_code=200, content=body, content_type=content_type)

    return _create


@pytest.fixture(name="fake_client")
def fixture_fake_client() -> Callable[..., FakeClient]:
    """Return a factory of in-memory clients."""

    def _create(routes: Optional[Mapping[str, HttpResponse | Exception]] = None) -> FakeClient:
        return FakeClient(routes)

    return _create
