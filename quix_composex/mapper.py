#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Module to map a docker-compose service to a Quix deployment and its application descriptor.
The mapping is a pure function of the service definition: it does not read nor write files.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from quix_composex.compose.compose_services import ComposeService

from compose_x_common.compose_x_common import keyisset, keypresent, set_else_none

from quix_composex.common import slugify
from quix_composex.common.diagnostics import Diagnostic
from quix_composex.common.envsubst import has_interpolation, parse_placeholder
from quix_composex.common.logging import LOG
from quix_composex.compose.compose_services.helpers import (
    env_value_to_str,
    set_memory_to_mb,
)
from quix_composex.exceptions import ValidationError
from quix_composex.quix import DEFAULT_PORT, DOCKERFILE_NAME
from quix_composex.quix.quix_app import QuixAppDescriptor
from quix_composex.quix.quix_deployment import (
    DeploymentResources,
    PublicAccess,
    QuixDeployment,
)
from quix_composex.quix.quix_variables import (
    FREE_TEXT,
    INPUT_TYPES,
    SECRET,
    TOPIC_TYPES,
    QuixVariable,
    classify_variable,
)


class MappingResult:
    """
    Output of the mapping of one service.

    :ivar QuixDeployment deployment:
    :ivar QuixAppDescriptor app:
    :ivar str dockerfile_source: path to the Dockerfile to copy as ``dockerfile``. None for image only services.
    :ivar str dockerfile_content: generated dockerfile for image only services.
    :ivar list[Diagnostic] diagnostics:
    """

    def __init__(
        self,
        service_name: str,
        deployment: QuixDeployment,
        app: QuixAppDescriptor,
        diagnostics: list[Diagnostic],
        dockerfile_source: str = None,
        dockerfile_content: str = None,
    ):
        self.service_name = service_name
        self.deployment = deployment
        self.app = app
        self.diagnostics = diagnostics
        self.dockerfile_source = dockerfile_source
        self.dockerfile_content = dockerfile_content

    def __repr__(self):
        return f"{self.service_name} -> {self.app.name}/{DOCKERFILE_NAME}"

    @property
    def application(self) -> str:
        return self.deployment.application


def define_application_key(service: ComposeService) -> str:
    """
    The application folder name, from x-quix.application or the service name

    :raises ValidationError: if nothing usable remains once slugified
    """
    application = slugify(str(set_else_none("application", service.x_quix, service.name)))
    if not application:
        raise ValidationError(
            f"services.{service.name} - cannot define an application name",
            service_name=service.name,
        )
    return application


def define_public_access(
    service: ComposeService, diagnostics: list[Diagnostic]
) -> PublicAccess | None:
    """
    Any port of the service is replaced with the Quix port. Public access is enabled when ports are set.

    :raises ValidationError: when more than one target port is declared
    """
    for port in service.expose_ports:
        if port != DEFAULT_PORT:
            diagnostics.append(
                Diagnostic(
                    service.name,
                    f"expose {port} - the container must listen on {DEFAULT_PORT} in Quix",
                )
            )
    targets = []
    for target in service.ports:
        if target not in targets:
            targets.append(target)
    if not targets:
        return None
    if len(targets) > 1:
        raise ValidationError(
            f"services.{service.name} - ambiguous ports {targets}. "
            f"Only one port can be published, on {DEFAULT_PORT}",
            service_name=service.name,
        )
    if targets[0] != DEFAULT_PORT:
        LOG.info(
            f"services.{service.name} - port {targets[0]} replaced with {DEFAULT_PORT}"
        )
    url_prefix = slugify(str(set_else_none("urlPrefix", service.x_quix, service.name)))
    return PublicAccess(True, url_prefix)


def define_resources(service: ComposeService) -> DeploymentResources:
    """
    CPU, RAM and replicas from the compose deploy definition, overridden by x-quix.resources
    """
    overrides = set_else_none("resources", service.x_quix, {})
    try:
        memory = set_else_none("memory", overrides, service.mem_amount)
        if isinstance(memory, str):
            memory = set_memory_to_mb(memory)
        return DeploymentResources(
            cpu=set_else_none("cpu", overrides, service.cpu_amount),
            memory=memory,
            replicas=set_else_none("replicas", overrides, service.replicas, True),
        )
    except (TypeError, ValueError) as error:
        raise ValidationError(
            f"services.{service.name} - invalid resources: {error}",
            service_name=service.name,
        ) from error


def define_variable(
    service: ComposeService,
    name: str,
    raw_value,
    override: dict,
    diagnostics: list[Diagnostic],
) -> QuixVariable:
    """
    Creates the QuixVariable for an environment variable.

    * Secret (from the name, or override): only a secretKey is set, any literal value is discarded.
    * Placeholder (``${VAR}``) or no value: required, without value.
    * ``${VAR:-default}``: the default is the value, not required.
    * Literal: the value, not required.
    """
    input_type = set_else_none("inputType", override, classify_variable(name))
    if input_type not in INPUT_TYPES:
        raise ValidationError(
            f"services.{service.name} - {name}.inputType {input_type} is not valid. "
            f"Must be one of {INPUT_TYPES}",
            service_name=service.name,
        )
    placeholder = parse_placeholder(raw_value)
    if raw_value is None:
        source_name, literal = name, None
    elif placeholder:
        source_name, literal = placeholder.name, placeholder.default
    else:
        source_name, literal = name, raw_value
    description = set_else_none(
        "description", override, f"{name} environment variable of {service.name}"
    )

    if input_type == SECRET:
        if literal is not None:
            diagnostics.append(
                Diagnostic(
                    service.name,
                    f"{name} - literal value dropped, set secret {source_name} in Quix instead",
                )
            )
        return QuixVariable(
            name,
            SECRET,
            description=description,
            required=set_else_none("required", override, True, True),
            secret_key=set_else_none("secretKey", override, source_name),
        )

    if literal is None:
        if input_type == FREE_TEXT and not keypresent("inputType", override):
            diagnostics.append(
                Diagnostic(
                    service.name,
                    f"{name} - no value, defaulted to {FREE_TEXT}. Must be set at deployment",
                )
            )
        required = True
    else:
        required = input_type in TOPIC_TYPES
        if placeholder is None and has_interpolation(literal):
            diagnostics.append(
                Diagnostic(
                    service.name,
                    f"{name} - value {literal} has variables interpolation, kept as-is",
                )
            )
    return QuixVariable(
        name,
        input_type,
        description=description,
        required=set_else_none("required", override, required, True),
        value=literal,
    )


def define_variables(
    service: ComposeService, diagnostics: list[Diagnostic]
) -> list[QuixVariable]:
    """
    Variables from the service environment, in order, followed by the x-quix.variables not in the environment.
    """
    overrides = set_else_none("variables", service.x_quix, {})
    if not isinstance(overrides, dict):
        raise ValidationError(
            f"services.{service.name} - x-quix.variables must be a mapping",
            service_name=service.name,
        )
    to_map = list(service.environment.items())
    for name, override in overrides.items():
        if name not in service.environment:
            value = set_else_none("value", override, None, True)
            to_map.append((name, env_value_to_str(value)))
    variables = []
    for name, raw_value in to_map:
        override = set_else_none(name, overrides, {})
        if not isinstance(override, dict):
            raise ValidationError(
                f"services.{service.name} - x-quix.variables.{name} must be a mapping",
                service_name=service.name,
            )
        try:
            variables.append(
                define_variable(service, name, raw_value, override, diagnostics)
            )
        except ValueError as error:
            raise ValidationError(
                f"services.{service.name} - {name}: {error}", service_name=service.name
            ) from error
    return variables


def drop_volumes(service: ComposeService, diagnostics: list[Diagnostic]) -> None:
    for source, target in service.volumes:
        diagnostics.append(
            Diagnostic(
                service.name,
                f"volume {source if source else '<anonymous>'}:{target} dropped, not supported",
            )
        )


def map_service(service: ComposeService) -> MappingResult:
    """
    Maps a compose service to the Quix deployment and application descriptor.

    :param ComposeService service:
    :return: the deployment, app and the warnings raised
    :rtype: MappingResult
    :raises ValidationError: when the service cannot be deployed
    """
    if not service.has_build and not service.image:
        raise ValidationError(
            f"services.{service.name} - no build nor image defined. Nothing to deploy",
            service_name=service.name,
        )
    diagnostics = []
    application = define_application_key(service)
    public_access = define_public_access(service, diagnostics)
    variables = define_variables(service, diagnostics)
    drop_volumes(service, diagnostics)

    deployment = QuixDeployment(
        name=service.name,
        application=application,
        resources=define_resources(service),
        public_access=public_access,
        variables=variables,
    )
    app = QuixAppDescriptor(
        name=application,
        entry_point=set_else_none("entryPoint", service.x_quix),
        variables=variables,
    )
    if service.has_build:
        dockerfile_source = service.dockerfile_path
        dockerfile_content = None
    else:
        dockerfile_source = None
        dockerfile_content = f"FROM {service.image}\nEXPOSE {DEFAULT_PORT}\n"
    if keyisset("build", service.definition) and service.image:
        LOG.debug(f"services.{service.name} - build and image set. Using build")
    return MappingResult(
        service.name,
        deployment,
        app,
        diagnostics,
        dockerfile_source=dockerfile_source,
        dockerfile_content=dockerfile_content,
    )
