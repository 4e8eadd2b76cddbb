#  -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2021 John Mille<john@compose-x.io>

"""
Tests for the settings and compose content loading
"""

from os import path

from pytest import fixture, raises

from quix_composex.common.settings import QuixComposeSettings, merge_definitions
from quix_composex.exceptions import ComposeFileError, ValidationError


@fixture
def here():
    return path.abspath(path.dirname(__file__))


@fixture
def blog_files(here):
    return [
        f"{here}/../use-cases/blog/docker-compose.yml",
        f"{here}/../use-cases/blog/docker-compose.override.yml",
    ]


def test_merge_definitions():
    original = {"services": {"api": {"image": "a", "environment": {"A": "1"}}}}
    override = {"services": {"api": {"environment": {"B": "2"}, "ports": [80]}}}
    assert merge_definitions(original, override) == {
        "services": {
            "api": {"image": "a", "environment": {"A": "1", "B": "2"}, "ports": [80]}
        }
    }
    assert original["services"]["api"]["environment"] == {"A": "1"}


def test_merge_services_like_compose():
    original = {
        "services": {
            "api": {
                "image": "a",
                "environment": {"A": "1", "C": "3"},
                "ports": ["8080:3000"],
                "volumes": ["./data:/data"],
            },
            "worker": {"image": "w", "environment": ["A=1"]},
        }
    }
    override = {
        "services": {
            "api": {
                "environment": ["B=2", "C=4"],
                "ports": ["8080:3000", "9090:3000"],
                "volumes": ["./cache:/cache"],
            },
            "worker": {"environment": ["B=2"]},
            "redis": {"image": "redis"},
        }
    }
    merged = merge_definitions(original, override)
    api = merged["services"]["api"]
    assert api["environment"] == {"A": "1", "C": "4", "B": "2"}
    assert api["ports"] == ["8080:3000", "9090:3000"]
    assert api["volumes"] == ["./data:/data", "./cache:/cache"]
    assert merged["services"]["worker"]["environment"] == {"A": "1", "B": "2"}
    assert merged["services"]["redis"] == {"image": "redis"}
    assert original["services"]["worker"]["environment"] == ["A=1"]


def test_list_environment_override_file(tmp_path):
    base = tmp_path / "docker-compose.yml"
    base.write_text(
        "services:\n  api:\n    image: api\n    environment:\n      A: '1'\n"
    )
    override = tmp_path / "docker-compose.override.yml"
    override.write_text("services:\n  api:\n    environment:\n      - B=2\n")
    settings = QuixComposeSettings(
        **{QuixComposeSettings.input_file_arg: [str(base), str(override)]}
    )
    assert settings.services[0].environment == {"A": "1", "B": "2"}

    override.write_text("services:\n  api:\n    environment:\n      - =2\n")
    with raises(ComposeFileError):
        QuixComposeSettings(
            **{QuixComposeSettings.input_file_arg: [str(base), str(override)]}
        )


def test_load_single_file(blog_files):
    settings = QuixComposeSettings(
        **{QuixComposeSettings.input_file_arg: blog_files[0]}
    )
    assert [service.name for service in settings.services] == [
        "api",
        "worker",
        "processor",
        "redis",
    ]
    assert not settings.failures
    api = settings.services[0]
    assert api.replicas == 2
    assert api.environment["LOG_LEVEL"] == "info"
    assert settings.base_dir == path.dirname(path.abspath(blog_files[0]))
    assert settings.output_dir == QuixComposeSettings.default_output_dir


def test_override_files(blog_files):
    settings = QuixComposeSettings(
        **{
            QuixComposeSettings.input_file_arg: blog_files,
            QuixComposeSettings.output_dir_arg: "/tmp/out",
        }
    )
    api = settings.services[0]
    assert api.replicas == 3
    assert api.environment["LOG_LEVEL"] == "debug"
    assert api.environment["API_KEY"] == "${API_KEY}"
    assert settings.output_dir == "/tmp/out"


def test_content_only():
    settings = QuixComposeSettings(
        content={"services": {"web": {"image": "nginx", "ports": [80]}}}
    )
    assert settings.services[0].ports == [80]


def test_invalid_inputs(here):
    with raises(ComposeFileError):
        QuixComposeSettings()
    with raises(ComposeFileError):
        QuixComposeSettings(
            **{
                QuixComposeSettings.input_file_arg: f"{here}/../use-cases/invalid/not-compose.yml"
            }
        )
    with raises(ComposeFileError):
        QuixComposeSettings(
            **{QuixComposeSettings.input_file_arg: f"{here}/../use-cases/missing.yml"}
        )
    with raises(ComposeFileError):
        QuixComposeSettings(content={"services": {"api": {"x-quix": {"port": 80}}}})


def test_import_failures_are_per_service(here):
    settings = QuixComposeSettings(
        **{
            QuixComposeSettings.input_file_arg: f"{here}/../use-cases/invalid/partial.yml"
        }
    )
    assert list(settings.failures.keys()) == ["badport"]
    assert isinstance(settings.failures["badport"], ValidationError)
    assert "badport" not in [service.name for service in settings.services]


def test_published_ports_and_empty_env_names():
    settings = QuixComposeSettings(
        content={
            "services": {
                "api": {"image": "api", "ports": ["${API_PORT:-8080}:3000"]},
                "web": {"image": "web", "ports": ["8000-8001:3000"]},
                "broken": {"image": "broken", "environment": ["=x"]},
            }
        }
    )
    assert [service.name for service in settings.services] == ["api", "web"]
    assert list(settings.failures.keys()) == ["broken"]
    assert settings.services[0].ports == [3000]
