#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Quix variables, as set in the deployments (quix.yaml) and applications (app.yaml)
"""

from __future__ import annotations

import re

from quix_composex.quix import QuixObject

FREE_TEXT = "FreeText"
SECRET = "Secret"
INPUT_TOPIC = "InputTopic"
OUTPUT_TOPIC = "OutputTopic"
INPUT_TYPES = [FREE_TEXT, SECRET, INPUT_TOPIC, OUTPUT_TOPIC]
TOPIC_TYPES = [INPUT_TOPIC, OUTPUT_TOPIC]

SECRET_NAME_RE = re.compile(r"(key|secret|password|token|credential)", re.IGNORECASE)


def classify_variable(name: str) -> str:
    """
    Defines the inputType of an environment variable from its name.

    :param str name: the environment variable name
    :return: Secret if the name looks sensitive, FreeText otherwise
    :rtype: str
    """
    if SECRET_NAME_RE.search(name):
        return SECRET
    return FREE_TEXT


class QuixVariable(QuixObject):
    """
    Class to represent a variable of a Quix deployment / application.

    :ivar str name: name of the environment variable
    :ivar str input_type: one of INPUT_TYPES
    :ivar str description:
    :ivar bool required:
    :ivar str value: literal value. Never set for Secret
    :ivar str secret_key: name of the secret in the Quix secrets store. Only for Secret
    """

    def __init__(
        self,
        name: str,
        input_type: str,
        description: str = None,
        required: bool = False,
        value: str = None,
        secret_key: str = None,
    ):
        if input_type not in INPUT_TYPES:
            raise ValueError(
                name, "inputType", input_type, "is not valid. Must be one of", INPUT_TYPES
            )
        if input_type == SECRET:
            if value is not None:
                raise ValueError(name, "Secret variables cannot have a literal value")
            if not secret_key:
                raise ValueError(name, "Secret variables must define the secretKey")
        elif secret_key is not None:
            raise ValueError(name, "Only Secret variables can set secretKey")
        self.name = name
        self.input_type = input_type
        self.description = description or ""
        self.required = bool(required)
        self.value = value
        self.secret_key = secret_key
        self._freeze()

    def __repr__(self):
        return f"{self.name}({self.input_type})"

    @property
    def is_secret(self) -> bool:
        return self.input_type == SECRET

    @property
    def is_topic(self) -> bool:
        return self.input_type in TOPIC_TYPES

    @property
    def topic_name(self) -> str | None:
        """Name of the topic the variable points to. The value if set, else the variable name"""
        if not self.is_topic:
            return None
        return self.value if self.value else self.name

    def to_dict(self) -> dict:
        """Variable as set in the deployments of quix.yaml"""
        definition = {
            "name": self.name,
            "inputType": self.input_type,
            "description": self.description,
            "required": self.required,
        }
        if self.is_secret:
            definition["secretKey"] = self.secret_key
        elif self.value is not None:
            definition["value"] = self.value
        return definition

    def to_app_dict(self) -> dict:
        """Variable as set in app.yaml, which uses defaultValue. Secrets never get one."""
        definition = {
            "name": self.name,
            "inputType": self.input_type,
            "description": self.description,
            "required": self.required,
        }
        if not self.is_secret and self.value is not None:
            definition["defaultValue"] = self.value
        return definition
