#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from __future__ import annotations

import jsonschema
from referencing.jsonschema import EMPTY_REGISTRY as _EMPTY_REGISTRY

from quix_composex.specs._core import _schemas, load_spec

REGISTRY = (_schemas() @ _EMPTY_REGISTRY).crawl()

COMPOSE_SPEC = "compose.spec.json"
PROJECT_SPEC = "quix-project.spec.json"
APP_SPEC = "quix-app.spec.json"


def validate_against(content: dict, spec_name: str) -> None:
    """
    Validates the content against one of the bundled specs

    :raises jsonschema.exceptions.ValidationError: if the content is not valid
    """
    jsonschema.validate(content, load_spec(spec_name), registry=REGISTRY)


__all__ = [
    "REGISTRY",
    "COMPOSE_SPEC",
    "PROJECT_SPEC",
    "APP_SPEC",
    "validate_against",
    "load_spec",
]
