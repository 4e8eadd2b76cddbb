#  -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2021 John Mille<john@compose-x.io>

from quix_composex.common.envsubst import has_interpolation, parse_placeholder


def test_placeholders():
    """
    Function to test placeholders detection.

    [(ENV string, expected name, expected default)]
    """
    tests = [
        ("${API_KEY}", "API_KEY", None),
        ("$API_KEY", "API_KEY", None),
        ("${URL:-http://localhost}", "URL", "http://localhost"),
        ("${URL-http://localhost}", "URL", "http://localhost"),
        ("${TOKEN:?token must be set}", "TOKEN", None),
        ("${EMPTY:-}", "EMPTY", ""),
    ]
    for test in tests:
        placeholder = parse_placeholder(test[0])
        assert placeholder is not None
        assert placeholder.name == test[1]
        assert placeholder.default == test[2]


def test_not_placeholders():
    for value in [
        "redis://redis:6379",
        "http://${HOST}:8080",
        "$$ESCAPED",
        "${1INVALID}",
        None,
        42,
    ]:
        assert parse_placeholder(value) is None


def test_interpolation():
    assert has_interpolation("http://${HOST}:8080")
    assert has_interpolation("$HOST")
    assert not has_interpolation("$$HOST")
    assert not has_interpolation("plain")
    assert not has_interpolation(None)
