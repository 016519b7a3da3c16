"""Tests for help, legal and not-found pages."""

from __future__ import annotations

import pytest

from storefront.pages.content import HELP_PAGES, LEGAL_PAGES


@pytest.mark.parametrize("slug", sorted(HELP_PAGES))
def test_help_pages_render(client, slug):
    response = client.get(f"/help/{slug}")

    assert response.status_code == 200
    assert f'data-page="help-{slug}"'.encode() in response.data
    assert HELP_PAGES[slug].title.encode() in response.data


@pytest.mark.parametrize("slug", sorted(LEGAL_PAGES))
def test_legal_pages_render(client, slug):
    response = client.get(f"/legal/{slug}")

    assert response.status_code == 200
    assert f'data-page="legal-{slug}"'.encode() in response.data


def test_unknown_content_page_is_not_found(client):
    assert client.get("/help/unknown").status_code == 404
    assert client.get("/legal/unknown").status_code == 404


def test_unknown_route_renders_not_found_page(client):
    response = client.get("/definitely/not/here")

    assert response.status_code == 404
    assert b'data-page="not-found"' in response.data
