#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Module for the application descriptor, app.yaml, set in each application folder
"""

from __future__ import annotations

from quix_composex.quix import (
    DEFAULT_ENTRY_POINT,
    DEFAULT_LANGUAGE,
    DOCKERFILE_NAME,
    QuixObject,
)
from quix_composex.quix.quix_variables import QuixVariable


class QuixAppDescriptor(QuixObject):
    """
    Class to represent app.yaml

    :ivar str name: the application name, must match the deployment application
    :ivar str entry_point: the file to run in the application
    :ivar tuple[QuixVariable] variables:
    """

    language = DEFAULT_LANGUAGE
    dockerfile = DOCKERFILE_NAME

    def __init__(
        self,
        name: str,
        entry_point: str = None,
        variables: list[QuixVariable] = None,
    ):
        self.name = name
        self.entry_point = entry_point if entry_point else DEFAULT_ENTRY_POINT
        self.variables = tuple(variables) if variables else ()
        self._freeze()

    def __repr__(self):
        return self.name

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "language": self.language,
            "variables": [variable.to_app_dict() for variable in self.variables],
            "dockerfile": self.dockerfile,
            "runEntryPoint": self.entry_point,
            "defaultFile": self.entry_point,
        }
