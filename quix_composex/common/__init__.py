#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Most commonly used functions shared across all modules.
"""

from __future__ import annotations

import re

NONALPHANUM = re.compile(r"([^a-zA-Z\d]+)")


def slugify(name: str) -> str:
    """
    Function to turn a compose name into a lowercase, dash separated, key usable as folder name or URL prefix

    :param str name: the name to slugify
    :returns: slug, i.e. ``My_API.v2`` gives ``my-api-v2``
    :rtype: str
    """
    if not isinstance(name, str):
        raise TypeError("name must be of type", str, "got", type(name))
    return NONALPHANUM.sub("-", name).strip("-").lower()
