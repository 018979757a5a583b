import logging
import urllib.request

import pytest

from expense_tracker.api.routes import (
    ROUTE_RULES,
    MethodEnforcer,
    allowed_methods,
    correct_method,
    relative_path,
)

BASE = "http://backend.test/api"


@pytest.mark.parametrize(
    "path, method, expected",
    [
        ("/auth/register/", "GET", "POST"),
        ("/auth/login", "PUT", "POST"),
        ("/transactions/", "DELETE", "POST"),
        ("/transactions/", "PUT", "POST"),
        ("/transactions/12/", "GET", "PUT"),
        ("/transactions/12/", "POST", "PUT"),
        ("/categories/", "PUT", "POST"),
        ("/categories/3", "GET", "PUT"),
        ("/summary/", "POST", "GET"),
        ("/export/", "DELETE", "GET"),
    ],
)
def test_disallowed_method_is_rewritten(path, method, expected):
    assert correct_method(path, method) == expected


@pytest.mark.parametrize(
    "path, method",
    [
        ("/transactions/", "GET"),
        ("/transactions/", "POST"),
        ("/transactions/7/", "DELETE"),
        ("/categories/", "GET"),
        ("/categories/7/", "PUT"),
        ("/summary/", "GET"),
        ("/export", "GET"),
        ("/auth/login/", "POST"),
    ],
)
def test_allowed_method_is_kept(path, method):
    assert correct_method(path, method) == method


def test_unmatched_path_passes_through():
    assert correct_method("/budgets/", "DELETE") == "DELETE"
    assert correct_method("/transactions/abc/", "PATCH") == "PATCH"
    assert allowed_methods("/budgets/") == ()


def test_every_rule_corrects_to_an_allowed_method():
    samples = {
        r"^/auth/register/?$": "/auth/register/",
        r"^/auth/login/?$": "/auth/login/",
        r"^/transactions/?$": "/transactions/",
        r"^/transactions/\d+/?$": "/transactions/1/",
        r"^/categories/?$": "/categories/",
        r"^/categories/\d+/?$": "/categories/1/",
        r"^/summary/?$": "/summary/",
        r"^/export/?$": "/export/",
    }
    for pattern, methods in ROUTE_RULES:
        path = samples[pattern.pattern]
        for method in ("GET", "POST", "PUT", "DELETE", "PATCH"):
            corrected = correct_method(path, method)
            assert corrected in allowed_methods(path)
            if method not in allowed_methods(path) and "POST" in allowed_methods(path):
                assert corrected == "POST"


def test_correction_is_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="expense_tracker.api.routes"):
        correct_method("/auth/register/", "GET")
    assert "from GET to POST" in caplog.text
    assert "/auth/register/" in caplog.text


def test_relative_path_strips_base_and_query():
    assert relative_path(f"{BASE}/transactions/?user_id=1&type=Income", BASE) == "/transactions/"
    assert relative_path("http://elsewhere.test/summary/?user_id=1", BASE) == "/summary/"


def test_method_enforcer_only_touches_method():
    req = urllib.request.Request(
        f"{BASE}/auth/register/?next=1",
        data=b'{"username": "a"}',
        headers={"Content-Type": "application/json"},
        method="GET",
    )
    out = MethodEnforcer(BASE).http_request(req)
    assert out.get_method() == "POST"
    assert out.full_url == f"{BASE}/auth/register/?next=1"
    assert out.data == b'{"username": "a"}'
    assert out.get_header("Content-type") == "application/json"


def test_method_enforcer_leaves_unknown_paths():
    req = urllib.request.Request(f"{BASE}/budgets/", method="DELETE")
    assert MethodEnforcer(BASE).https_request(req).get_method() == "DELETE"


def test_method_enforcer_accepts_custom_rules():
    import re
    rules = ((re.compile(r"^/budgets/?$"), ("PUT",)),)
    req = urllib.request.Request(f"{BASE}/budgets/", method="GET")
    assert MethodEnforcer(BASE, rules).http_request(req).get_method() == "PUT"
