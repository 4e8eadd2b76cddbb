#  -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2021 John Mille<john@compose-x.io>

"""
Tests for the conversion of all the services of a compose project
"""

from os import path

from pytest import fixture

from quix_composex.common.settings import QuixComposeSettings
from quix_composex.compose.compose_services import ComposeService
from quix_composex.exceptions import ValidationError
from quix_composex.quix.quix_variables import SECRET
from quix_composex.quix_composex import convert_services, generate_project


@fixture
def here():
    return path.abspath(path.dirname(__file__))


@fixture
def blog_settings(here):
    return QuixComposeSettings(
        **{
            QuixComposeSettings.input_file_arg: [
                f"{here}/../use-cases/blog/docker-compose.yml"
            ]
        }
    )


def test_blog_conversion(blog_settings):
    conversion = generate_project(blog_settings)
    assert conversion.successful
    assert [result.application for result in conversion.results] == [
        "api",
        "worker",
        "posts-processor",
        "redis",
    ]
    assert conversion.project.topics == (
        "blog-posts",
        "blog-posts-enriched",
        "blog-errors",
    )
    assert len(conversion.diagnostics) == 7

    api = conversion.get_result("api")
    assert api.deployment.public_access.enabled
    assert api.deployment.resources.to_dict() == {
        "cpu": 500,
        "memory": 1024,
        "replicas": 2,
    }
    worker = conversion.get_result("worker")
    assert [variable.name for variable in worker.deployment.variables] == [
        "CONCURRENCY",
        "QUEUE_NAME",
        "SMTP_PASSWORD",
        "REDIS_URL",
    ]
    assert worker.deployment.variables[2].input_type == SECRET
    assert worker.dockerfile_source.endswith(
        path.join("blog", "worker", "Dockerfile.worker")
    )
    redis = conversion.get_result("redis")
    assert redis.deployment.public_access is None
    assert redis.dockerfile_content.startswith("FROM redis:7-alpine")
    assert conversion.get_result("unknown") is None


def test_partial_failures(here):
    settings = QuixComposeSettings(
        **{
            QuixComposeSettings.input_file_arg: f"{here}/../use-cases/invalid/partial.yml"
        }
    )
    conversion = generate_project(settings)
    assert not conversion.successful
    assert [result.service_name for result in conversion.results] == [
        "web",
        "my_api",
    ]
    assert sorted(conversion.failures.keys()) == [
        "badport",
        "multi",
        "my-api",
        "nothing",
    ]
    for name, error in conversion.failures.items():
        assert isinstance(error, ValidationError)
        assert error.service_name == name
    assert "my_api" in str(conversion.failures["my-api"])
    assert [
        deployment.name for deployment in conversion.project.deployments
    ] == ["web", "my_api"]


def test_duplicate_application_key():
    services = [
        ComposeService("api", {"image": "a"}),
        ComposeService("worker", {"image": "w", "x-quix": {"application": "API"}}),
    ]
    conversion = convert_services(services)
    assert [result.service_name for result in conversion.results] == ["api"]
    assert list(conversion.failures.keys()) == ["worker"]


def test_services_order_does_not_change_records():
    api = ComposeService("api", {"image": "a", "ports": [3000]})
    worker = ComposeService("worker", {"image": "w", "environment": {"A": "b"}})
    first = convert_services([api, worker])
    second = convert_services([worker, api])
    assert first.get_result("api").deployment == second.get_result("api").deployment
    assert (
        first.get_result("worker").deployment
        == second.get_result("worker").deployment
    )
