#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Module to import the services defined in compose files and import / transform the settings into
Quix Compose-X usable properties
"""

from __future__ import annotations

from copy import deepcopy
from os import path

from compose_x_common.compose_x_common import set_else_none

from quix_composex.common.logging import LOG

from .helpers import (
    import_build,
    import_deploy_resources,
    import_env_files,
    import_env_variables,
    import_volumes,
    set_service_ports,
)


class ComposeService:
    """
    Class to represent a docker-compose singleton service

    :ivar str name: name of the service in the compose file
    :ivar str build_context: path to the build context, None when using image only
    :ivar str dockerfile: path to the Dockerfile, relative to build_context
    :ivar str image: the image reference
    :ivar list[dict] ports_definitions: normalized ports, with protocol, published and target
    :ivar dict environment: environment variables, env_file content overridden by environment
    :ivar list[tuple] volumes: (source, target) of the volumes mounted
    :ivar dict x_quix: the x-quix extension settings
    """

    main_key = "services"
    x_key = "x-quix"

    def __init__(self, name: str, definition: dict, base_dir: str = None):
        if not isinstance(definition, dict):
            raise TypeError(
                name, "definition must be of type", dict, "got", type(definition)
            )
        self._definition = deepcopy(definition)
        self.name = name
        self.base_dir = base_dir

        self.image = set_else_none("image", self.definition)
        self.build_context, self.dockerfile = import_build(
            set_else_none("build", self.definition)
        )
        self.ports_definitions = set_service_ports(
            set_else_none("ports", self.definition, [])
        )
        self.expose_ports = [
            int(str(port).split("/")[0])
            for port in set_else_none("expose", self.definition, [])
        ]
        self.environment = import_env_files(
            set_else_none("env_file", self.definition), base_dir
        )
        self.environment.update(
            import_env_variables(set_else_none("environment", self.definition))
        )
        self.volumes = import_volumes(set_else_none("volumes", self.definition, []))

        self.deploy = set_else_none("deploy", self.definition, {})
        self.replicas = set_else_none("replicas", self.deploy, None, True)
        self.cpu_amount, self.mem_amount = import_deploy_resources(self.deploy)
        self.x_quix = set_else_none(self.x_key, self.definition, {})
        if not isinstance(self.x_quix, dict):
            raise TypeError(
                name, self.x_key, "must be of type", dict, "got", type(self.x_quix)
            )
        LOG.debug(f"services.{self.name} - imported {self.environment.keys()}")

    def __repr__(self):
        return self.name

    @property
    def definition(self) -> dict:
        return self._definition

    @property
    def ports(self) -> list[int]:
        """The container (target) ports, in the order they are declared"""
        return [port["target"] for port in self.ports_definitions]

    @property
    def has_build(self) -> bool:
        return self.build_context is not None

    @property
    def dockerfile_path(self) -> str | None:
        """
        Path to the source Dockerfile, resolved from the compose file directory when relative
        """
        if not self.has_build:
            return None
        context = self.build_context
        if self.base_dir and not path.isabs(context):
            context = path.join(self.base_dir, context)
        if path.isabs(self.dockerfile):
            return path.normpath(self.dockerfile)
        return path.normpath(path.join(context, self.dockerfile))
