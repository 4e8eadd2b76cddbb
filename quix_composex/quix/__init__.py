#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Quix Cloud descriptors (deployments, applications, variables) generated from the compose services
"""

from __future__ import annotations

DEFAULT_PORT = 80
DEFAULT_LANGUAGE = "docker"
DOCKERFILE_NAME = "dockerfile"
APP_FILE_NAME = "app.yaml"
PROJECT_FILE_NAME = "quix.yaml"
DEFAULT_ENTRY_POINT = "main.py"


class QuixObject:
    """
    Write-once record. Attributes are set in __init__ then cannot be reassigned.
    Two objects are equal when their serialized definitions are equal.
    """

    _frozen = False

    def __setattr__(self, key, value):
        if self._frozen:
            raise AttributeError(
                f"{type(self).__name__}.{key} cannot be set, object is read-only"
            )
        super().__setattr__(key, value)

    def _freeze(self):
        object.__setattr__(self, "_frozen", True)

    def to_dict(self) -> dict:
        raise NotImplementedError(type(self).__name__, "must implement to_dict")

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash(repr(self.to_dict()))
