#  -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2021 John Mille<john@compose-x.io>

"""
Tests for the quix-compose-x command line
"""

from os import path

import yaml
from pytest import fixture

from quix_composex import __version__
from quix_composex.cli import main


@fixture
def here():
    return path.abspath(path.dirname(__file__))


def test_version(capsys):
    assert main(["version"]) == 0
    assert __version__ in capsys.readouterr().out


def test_render(here, tmp_path):
    output_dir = str(tmp_path / "quix")
    assert (
        main(
            [
                "render",
                "-f",
                f"{here}/../use-cases/blog/docker-compose.yml",
                "-f",
                f"{here}/../use-cases/blog/docker-compose.override.yml",
                "-d",
                output_dir,
                "--loglevel",
                "warning",
            ]
        )
        == 0
    )
    with open(path.join(output_dir, "quix.yaml")) as quix_fd:
        project = yaml.safe_load(quix_fd)
    assert project["deployments"][0]["resources"]["replicas"] == 3


def test_render_partial_failure(here, tmp_path):
    output_dir = str(tmp_path / "quix")
    assert (
        main(
            [
                "render",
                "-f",
                f"{here}/../use-cases/invalid/partial.yml",
                "-d",
                output_dir,
            ]
        )
        == 1
    )
    assert path.exists(path.join(output_dir, "web", "app.yaml"))
    assert path.exists(path.join(output_dir, "my-api", "app.yaml"))


def test_config(here, tmp_path, capsys):
    assert (
        main(["config", "-f", f"{here}/../use-cases/blog/docker-compose.yml"]) == 0
    )
    output = capsys.readouterr().out
    assert "deployments:" in output
    assert "blog-posts-enriched" in output


def test_invalid_compose(here):
    assert (
        main(["config", "-f", f"{here}/../use-cases/invalid/not-compose.yml"]) == 1
    )
