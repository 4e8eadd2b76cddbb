#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Module for the Quix project descriptor, quix.yaml, at the root of the output directory
"""

from __future__ import annotations

from quix_composex.quix import QuixObject
from quix_composex.quix.quix_deployment import QuixDeployment

PROJECT_VERSION = 1.0


def define_topics(deployments: list[QuixDeployment]) -> list[str]:
    """
    Lists the topics used by the InputTopic / OutputTopic variables of the deployments.

    :return: the unique topic names, in the order they were found
    :rtype: list[str]
    """
    topics = []
    for deployment in deployments:
        for variable in deployment.variables:
            if variable.is_topic and variable.topic_name not in topics:
                topics.append(variable.topic_name)
    return topics


class QuixProject(QuixObject):
    """
    :ivar tuple[QuixDeployment] deployments:
    :ivar tuple[str] topics:
    """

    def __init__(self, deployments: list[QuixDeployment] = None):
        self.deployments = tuple(deployments) if deployments else ()
        self.topics = tuple(define_topics(list(self.deployments)))
        self._freeze()

    def to_dict(self) -> dict:
        return {
            "metadata": {"version": PROJECT_VERSION},
            "deployments": [deployment.to_dict() for deployment in self.deployments],
            "topics": [{"name": topic} for topic in self.topics],
        }
