#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Module for the QuixComposeSettings class
"""

from __future__ import annotations

from copy import deepcopy
from os import path

import jsonschema
import yaml
from compose_x_common.compose_x_common import keyisset, keypresent

from quix_composex.common.logging import LOG
from quix_composex.compose.compose_services import ComposeService
from quix_composex.compose.compose_services.helpers import import_env_variables
from quix_composex.exceptions import ComposeFileError, ValidationError
from quix_composex.specs import COMPOSE_SPEC, validate_against

SERVICE_LIST_KEYS = ("ports", "expose", "volumes", "env_file")


def merge_service_definitions(original: dict, override: dict) -> dict:
    """
    Merges two definitions of the same service, the way docker compose merges override files.

    * environment is merged by variable name, in list or mapping format.
    * ports, expose, volumes and env_file are appended to, without duplicates.
    * other mappings are merged recursively, other values from override replace original.

    :raises TypeError: if an environment cannot be imported
    :rtype: dict
    """
    merged = deepcopy(original)
    for key, value in override.items():
        if key == "environment" and keypresent(key, merged):
            merged[key] = import_env_variables(merged[key])
            merged[key].update(import_env_variables(value))
        elif (
            key in SERVICE_LIST_KEYS
            and keypresent(key, merged)
            and value is not None
            and merged[key] is not None
        ):
            originals = merged[key] if isinstance(merged[key], list) else [merged[key]]
            overrides = value if isinstance(value, list) else [value]
            merged[key] = originals + [
                deepcopy(entry) for entry in overrides if entry not in originals
            ]
        elif isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_definitions(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged


def merge_definitions(original: dict, override: dict) -> dict:
    """
    Merges two compose definitions. Services are merged with merge_service_definitions,
    other mappings are merged recursively, other values from override replace original.

    :return: a new merged dict
    :rtype: dict
    """
    merged = deepcopy(original)
    for key, value in override.items():
        if (
            key == ComposeService.main_key
            and isinstance(value, dict)
            and isinstance(merged.get(key), dict)
        ):
            for service_name, definition in value.items():
                if isinstance(definition, dict) and isinstance(
                    merged[key].get(service_name), dict
                ):
                    merged[key][service_name] = merge_service_definitions(
                        merged[key][service_name], definition
                    )
                else:
                    merged[key][service_name] = deepcopy(definition)
        elif isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_definitions(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged


def load_compose_file(file_path: str) -> dict:
    """
    Function to load a docker-compose file

    :param str file_path: path to the file
    :raises ComposeFileError: if the file cannot be read or is not a YAML mapping
    :rtype: dict
    """
    try:
        with open(file_path) as compose_fd:
            content = yaml.safe_load(compose_fd.read())
    except OSError as error:
        raise ComposeFileError(f"Unable to read {file_path}", error) from error
    except yaml.YAMLError as error:
        raise ComposeFileError(f"{file_path} is not valid YAML", error) from error
    if not isinstance(content, dict):
        raise ComposeFileError(
            f"{file_path} must be a mapping. Got {type(content).__name__}"
        )
    return content


class QuixComposeSettings:
    """
    Class to handle the settings to use for Quix Compose-X.

    :ivar list[ComposeService] services: services successfully imported from the compose content
    :ivar dict of {str: ValidationError} failures: services that could not be imported
    :ivar dict compose_content: the merged and validated compose content
    """

    render_arg = "render"
    config_render_arg = "config"
    version_arg = "version"
    command_arg = "command"

    input_file_arg = "DockerComposeXFile"
    output_dir_arg = "OutputDirectory"
    loglevel_arg = "loglevel"
    default_output_dir = "quix-project"

    active_commands = [
        {
            "name": render_arg,
            "help": "Converts the compose services and writes quix.yaml, app.yaml and dockerfile files",
        },
    ]
    validation_commands = [
        {
            "name": config_render_arg,
            "help": "Converts the compose services and prints quix.yaml",
        }
    ]
    neutral_commands = [
        {"name": version_arg, "help": "Quix Compose-X Version"},
    ]
    all_commands = active_commands + validation_commands + neutral_commands

    def __init__(self, content: dict = None, **kwargs):
        """
        :param dict content: compose content to use instead of, or override, the input files
        """
        self.services = []
        self.failures = {}
        self.compose_content = {}
        self.original_content = {}
        self.command = (
            kwargs[self.command_arg]
            if keyisset(self.command_arg, kwargs)
            else self.render_arg
        )
        input_files = (
            kwargs[self.input_file_arg]
            if keyisset(self.input_file_arg, kwargs)
            else []
        )
        self.input_files = (
            [input_files] if isinstance(input_files, str) else list(input_files)
        )
        self.base_dir = (
            path.abspath(path.dirname(self.input_files[0]))
            if self.input_files
            else path.abspath(".")
        )
        self.output_dir = (
            kwargs[self.output_dir_arg]
            if keyisset(self.output_dir_arg, kwargs)
            else self.default_output_dir
        )
        self.set_content(content)

    def __repr__(self):
        return f"QuixComposeSettings({self.input_files} -> {self.output_dir})"

    @property
    def no_write(self) -> bool:
        return self.command == self.config_render_arg

    def set_content(self, content: dict = None, fully_load: bool = True) -> None:
        """
        Method to initialize the compose content from the files, merged in order, then content.

        :param dict content:
        :param bool fully_load: whether to import the services.
        :raises ComposeFileError: if no input is given or the result is not a valid compose definition
        """
        if not self.input_files and content is None:
            raise ComposeFileError("No docker-compose file nor content to convert")
        definition = {}
        try:
            for file_path in self.input_files:
                LOG.debug(f"Loading {file_path}")
                definition = merge_definitions(
                    definition, load_compose_file(file_path)
                )
            if content:
                definition = merge_definitions(definition, content)
        except TypeError as error:
            raise ComposeFileError(
                "Unable to merge the compose definitions", error
            ) from error
        self.original_content = definition
        self.compose_content = deepcopy(definition)
        LOG.info(f"Validating against input schema {COMPOSE_SPEC}")
        try:
            validate_against(self.compose_content, COMPOSE_SPEC)
        except jsonschema.exceptions.ValidationError as error:
            raise ComposeFileError(
                f"Invalid compose definition at {'.'.join(str(p) for p in error.absolute_path)}: "
                f"{error.message}"
            ) from error
        if fully_load:
            self.set_services()

    def set_services(self) -> None:
        """
        Method to define the ComposeService for each service.
        A service that cannot be imported is kept in failures, the others are still imported.
        """
        if not keyisset(ComposeService.main_key, self.compose_content):
            LOG.warning("No services defined in the compose content")
            return
        for service_name, definition in self.compose_content[
            ComposeService.main_key
        ].items():
            try:
                service = ComposeService(service_name, definition or {}, self.base_dir)
            except (TypeError, ValueError, KeyError, OSError) as error:
                LOG.error(f"services.{service_name} - {error}")
                self.failures[service_name] = ValidationError(
                    f"services.{service_name} - {error}", service_name=service_name
                )
                continue
            self.services.append(service)
