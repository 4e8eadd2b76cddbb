#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Module to identify docker-compose variable substitution placeholders in environment values.
The values are not expanded: a placeholder means the value is provided at deployment time.
"""

from __future__ import annotations

import re

PLACEHOLDER_RE = re.compile(
    r"^\$(?:(?P<bare>[A-Za-z_][A-Za-z0-9_]*)|"
    r"\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)"
    r"(?:(?P<operator>:?[-?+])(?P<default>[^}]*))?\})$"
)
ENV_VAR_REGEXP = re.compile(r"(?<!\$)\$(\w+|\{([^}]*)\})")
IF_UNDEFINED = (":-", "-")


class Placeholder:
    """
    Represents a value that is a whole ``$VAR``, ``${VAR}``, ``${VAR:-default}`` or ``${VAR:?error}`` reference

    :ivar str name: the name of the variable referenced
    :ivar str default: the default value, if any, set with ``:-`` or ``-``
    """

    def __init__(self, name: str, default: str = None):
        self.name = name
        self.default = default

    def __repr__(self):
        return f"${{{self.name}}}"


def parse_placeholder(value) -> Placeholder | None:
    """
    Function to determine whether an env variable value is a substitution placeholder.

    :param value: the value as defined in the compose file
    :return: the placeholder if the whole value is a reference, None otherwise
    :rtype: Placeholder or None
    """
    if not isinstance(value, str):
        return None
    parts = PLACEHOLDER_RE.match(value.strip())
    if not parts:
        return None
    if parts.group("bare"):
        return Placeholder(parts.group("bare"))
    if parts.group("operator") in IF_UNDEFINED:
        return Placeholder(parts.group("name"), parts.group("default"))
    return Placeholder(parts.group("name"))


def has_interpolation(value) -> bool:
    """Whether the string contains any non-escaped ``$VAR`` or ``${VAR}`` reference"""
    if not isinstance(value, str):
        return False
    return bool(ENV_VAR_REGEXP.search(value))
