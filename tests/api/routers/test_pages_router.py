import json
from unittest.mock import Mock

import pytest
from fastapi import HTTPException

from seocrawl.api.routers.pages import create_pages_router
from seocrawl.domain import PageRecord
from seocrawl.exceptions import PageStoreError


def _get_endpoint(router, path: str, method: str):
    for route in router.routes:
        if getattr(route, "path", None) == path and method.upper() in getattr(route, "methods", set()):
            return route.endpoint
    raise AssertionError(f"No route found for {method} {path}")


def test_get_page_404():
    endpoint = _get_endpoint(create_pages_router(Mock(get_page=Mock(return_value=None))), "/pages/{page_id}", "GET")
    with pytest.raises(HTTPException) as exc:
        endpoint(page_id=1)
    assert exc.value.status_code == 404


def test_get_page_with_markup():
    page = PageRecord(page_id=1, url="https://example.com/", raw_markup="<p/>", optimized_markup="{}")
    pages_repo = Mock(get_page=Mock(return_value=page))
    endpoint = _get_endpoint(create_pages_router(pages_repo), "/pages/{page_id}", "GET")

    out = endpoint(page_id=1, include_markup=True)

    pages_repo.get_page.assert_called_once_with(1, full=True)
    assert out["raw_markup"] == "<p/>"
    assert out["optimized_markup"] == "{}"


def test_get_page_store_error_returns_error_body():
    pages_repo = Mock(get_page=Mock(side_effect=PageStoreError("internal database error")))
    endpoint = _get_endpoint(create_pages_router(pages_repo), "/pages/{page_id}", "GET")

    resp = endpoint(page_id=1, include_markup=None)

    assert resp.status_code == 500
    body = json.loads(resp.body)
    assert set(body) == {"error", "details"}
    assert "internal database error" not in body["details"]
