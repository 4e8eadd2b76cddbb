#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Module for the Quix deployment, one per compose service, listed in quix.yaml
"""

from __future__ import annotations

from quix_composex.quix import DEFAULT_PORT, QuixObject
from quix_composex.quix.quix_variables import QuixVariable

DEFAULT_CPU = 200
DEFAULT_MEMORY = 500
DEFAULT_REPLICAS = 1


class DeploymentResources(QuixObject):
    """
    :ivar int cpu: CPU in millicores
    :ivar int memory: RAM in MB
    :ivar int replicas:
    """

    def __init__(self, cpu: int = None, memory: int = None, replicas: int = None):
        self.cpu = int(cpu) if cpu is not None else DEFAULT_CPU
        self.memory = int(memory) if memory is not None else DEFAULT_MEMORY
        self.replicas = int(replicas) if replicas is not None else DEFAULT_REPLICAS
        for prop in ("cpu", "memory"):
            if getattr(self, prop) <= 0:
                raise ValueError(f"resources.{prop} must be greater than 0")
        if self.replicas < 0:
            raise ValueError("resources.replicas must be 0 or greater")
        self._freeze()

    def to_dict(self) -> dict:
        return {"cpu": self.cpu, "memory": self.memory, "replicas": self.replicas}


class PublicAccess(QuixObject):
    def __init__(self, enabled: bool, url_prefix: str = None):
        self.enabled = bool(enabled)
        self.url_prefix = url_prefix
        self._freeze()

    def to_dict(self) -> dict:
        definition = {"enabled": self.enabled}
        if self.url_prefix:
            definition["urlPrefix"] = self.url_prefix
        return definition


class QuixDeployment(QuixObject):
    """
    Class to represent a deployment in quix.yaml

    :ivar str name: name of the deployment
    :ivar str application: folder of the application, same as the QuixAppDescriptor name
    :ivar DeploymentResources resources:
    :ivar PublicAccess public_access: None when the service has no port
    :ivar tuple[QuixVariable] variables:
    """

    deployment_type = "Service"
    version = "latest"

    def __init__(
        self,
        name: str,
        application: str,
        resources: DeploymentResources = None,
        public_access: PublicAccess = None,
        variables: list[QuixVariable] = None,
    ):
        self.name = name
        self.application = application
        self.resources = resources if resources else DeploymentResources()
        self.public_access = public_access
        self.variables = tuple(variables) if variables else ()
        self._freeze()

    def __repr__(self):
        return f"{self.name}::{self.application}"

    @property
    def port(self) -> int | None:
        """The port the deployment listens on. Always the Quix default when exposed."""
        return DEFAULT_PORT if self.public_access else None

    def to_dict(self) -> dict:
        definition = {
            "name": self.name,
            "application": self.application,
            "version": self.version,
            "deploymentType": self.deployment_type,
            "resources": self.resources.to_dict(),
        }
        if self.public_access:
            definition["publicAccess"] = self.public_access.to_dict()
        definition["variables"] = [variable.to_dict() for variable in self.variables]
        return definition
