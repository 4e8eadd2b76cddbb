#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Main module to convert all the compose services into the Quix project.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from quix_composex.common.settings import QuixComposeSettings
    from quix_composex.compose.compose_services import ComposeService

from quix_composex.common.diagnostics import report_diagnostics
from quix_composex.common.logging import LOG
from quix_composex.exceptions import ValidationError
from quix_composex.mapper import MappingResult, map_service
from quix_composex.quix.quix_project import QuixProject


class ConversionResult:
    """
    Result of the conversion of all the services

    :ivar QuixProject project: the project with the deployments of all the services mapped successfully
    :ivar list[MappingResult] results: the mapping of each service converted
    :ivar dict of {str: ValidationError} failures: services that failed, by name
    :ivar list[Diagnostic] diagnostics: all the warnings, in order
    """

    def __init__(
        self,
        results: list[MappingResult],
        failures: dict[str, ValidationError],
    ):
        self.results = results
        self.failures = failures
        self.project = QuixProject([result.deployment for result in results])
        self.diagnostics = []
        for result in results:
            self.diagnostics += result.diagnostics

    @property
    def successful(self) -> bool:
        return not self.failures

    def get_result(self, service_name: str) -> MappingResult | None:
        for result in self.results:
            if result.service_name == service_name:
                return result
        return None


def check_application_unique(
    result: MappingResult, applications: dict[str, str]
) -> None:
    """
    Validates that no other service uses the same application folder

    :param MappingResult result:
    :param dict applications: application key to service name of the services already mapped
    :raises ValidationError: when the application is already used
    """
    if result.application in applications:
        raise ValidationError(
            f"services.{result.service_name} - application {result.application} "
            f"already used by services.{applications[result.application]}",
            service_name=result.service_name,
        )


def convert_services(
    services: list[ComposeService], failures: dict[str, ValidationError] = None
) -> ConversionResult:
    """
    Maps all the services, in order. A service that fails is recorded in failures, conversion carries on.

    :param list[ComposeService] services:
    :param dict failures: failures that already happened, i.e. when importing the services
    :rtype: ConversionResult
    """
    failures = dict(failures) if failures else {}
    results = []
    applications = {}
    for service in services:
        try:
            result = map_service(service)
            check_application_unique(result, applications)
        except ValidationError as error:
            LOG.error(error)
            failures[service.name] = error
            continue
        applications[result.application] = service.name
        results.append(result)
        LOG.info(f"services.{service.name} - mapped to {result.application}")
    return ConversionResult(results, failures)


def generate_project(settings: QuixComposeSettings) -> ConversionResult:
    """
    Function to convert the services of the settings compose content into the Quix project.
    Reports the warnings once all services are processed.

    :param QuixComposeSettings settings:
    :rtype: ConversionResult
    """
    conversion = convert_services(settings.services, settings.failures)
    report_diagnostics(conversion.diagnostics)
    if conversion.failures:
        LOG.error(
            f"{len(conversion.failures)} service(s) could not be converted: "
            f"{', '.join(conversion.failures.keys())}"
        )
    LOG.info(
        f"Converted {len(conversion.results)} service(s), {len(conversion.project.topics)} topic(s)"
    )
    return conversion
