#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Functions and classes to write the Quix project files to the local filesystem
"""

from __future__ import annotations

import re
from os import makedirs, path
from typing import TYPE_CHECKING

import yaml

try:
    from yaml import CDumper as Dumper
except ImportError:
    from yaml import Dumper

if TYPE_CHECKING:
    from quix_composex.mapper import MappingResult
    from quix_composex.quix_composex import ConversionResult

from quix_composex.common.diagnostics import Diagnostic
from quix_composex.common.logging import LOG
from quix_composex.quix import (
    APP_FILE_NAME,
    DEFAULT_PORT,
    DOCKERFILE_NAME,
    PROJECT_FILE_NAME,
)
from quix_composex.specs import APP_SPEC, PROJECT_SPEC, validate_against

YAML_MIME = "application/x-yaml"
TEXT_MIME = "text/plain"
EXPOSE_RE = re.compile(r"^\s*EXPOSE\s+(?P<ports>.+)$", re.IGNORECASE | re.MULTILINE)


class FileArtifact:
    """
    Class to handle files artifacts, such as quix.yaml, app.yaml or dockerfile.

    :cvar str body: The content of the FileArtifact
    :cvar str file_name: the base name of the file
    :cvar str mime: MIME-type of the file
    :cvar str spec: name of the JSON schema to validate the content against before writing
    :cvar str output_dir: Path to the local directory to output the file to.
    :cvar str file_path: Output file path for the FileArtifact
    """

    mime = TEXT_MIME
    file_path = None

    def __init__(self, file_name: str, output_dir: str, content=None, spec: str = None):
        if content is not None and not isinstance(content, (dict, list, str)):
            raise TypeError(
                "content must be of type", dict, list, str, "Got", type(content)
            )
        self.file_name = file_name
        self.output_dir = output_dir
        self.content = content
        self.spec = spec
        self.body = None
        if self.file_name.endswith(".yml") or self.file_name.endswith(".yaml"):
            self.mime = YAML_MIME
        self.file_path = path.join(output_dir, file_name)
        self.define_body()

    def __repr__(self):
        return self.file_path

    def define_body(self):
        """
        Method to define the body of the file artifact.
        """
        if isinstance(self.content, str):
            self.body = self.content
        elif isinstance(self.content, (list, dict)) and self.mime == YAML_MIME:
            self.body = yaml.dump(
                self.content, Dumper=Dumper, sort_keys=False, default_flow_style=False
            )
        else:
            self.body = ""

    def validate(self):
        """
        Method to validate the content against its JSON schema
        """
        if not self.spec or not isinstance(self.content, dict):
            return
        validate_against(self.content, self.spec)
        LOG.debug(f"{self.file_path} is valid against {self.spec}")

    def write(self):
        """
        Method to write the file to the local filesystem. Creates the output directory if needed.
        """
        self.validate()
        makedirs(self.output_dir, exist_ok=True)
        with open(self.file_path, "w") as file_fd:
            file_fd.write(self.body)
        LOG.info(
            f"{self.file_name} written successfully at {path.abspath(self.file_path)}"
        )


def check_dockerfile_ports(body: str, service_name: str) -> list[Diagnostic]:
    """
    Lists the EXPOSE directives of the dockerfile that do not use the Quix port
    """
    diagnostics = []
    for match in EXPOSE_RE.finditer(body):
        for port in match.group("ports").split():
            if port.split("/")[0] != str(DEFAULT_PORT):
                diagnostics.append(
                    Diagnostic(
                        service_name,
                        f"{DOCKERFILE_NAME} EXPOSE {port}. The container must listen on {DEFAULT_PORT}",
                    )
                )
    return diagnostics


def define_dockerfile(result: MappingResult, output_dir: str) -> FileArtifact:
    """
    Reads the source Dockerfile, unchanged, to be written as lowercase dockerfile in the application folder.
    Image only services use the generated dockerfile.

    :raises FileNotFoundError: when the source Dockerfile does not exist
    """
    if result.dockerfile_content is not None:
        body = result.dockerfile_content
    else:
        with open(result.dockerfile_source) as dockerfile_fd:
            body = dockerfile_fd.read()
    return FileArtifact(DOCKERFILE_NAME, path.join(output_dir, result.application), body)


def define_project_files(
    conversion: ConversionResult, output_dir: str
) -> tuple[list[FileArtifact], list[Diagnostic]]:
    """
    Defines all the files of the Quix project: quix.yaml at the root, app.yaml and dockerfile per application.

    :return: the files, and the diagnostics found checking the dockerfiles
    """
    files = [
        FileArtifact(
            PROJECT_FILE_NAME,
            output_dir,
            conversion.project.to_dict(),
            spec=PROJECT_SPEC,
        )
    ]
    diagnostics = []
    for result in conversion.results:
        app_dir = path.join(output_dir, result.application)
        files.append(
            FileArtifact(APP_FILE_NAME, app_dir, result.app.to_dict(), spec=APP_SPEC)
        )
        try:
            dockerfile = define_dockerfile(result, output_dir)
        except FileNotFoundError:
            diagnostics.append(
                Diagnostic(
                    result.service_name,
                    f"Dockerfile {result.dockerfile_source} not found. {DOCKERFILE_NAME} not written",
                )
            )
            continue
        diagnostics += check_dockerfile_ports(dockerfile.body, result.service_name)
        files.append(dockerfile)
    return files, diagnostics


def write_project_files(conversion: ConversionResult, output_dir: str) -> list[str]:
    """
    Writes the Quix project files. Warnings found in the dockerfiles are added to the conversion diagnostics.

    :return: path of the files written
    :rtype: list[str]
    """
    files, diagnostics = define_project_files(conversion, output_dir)
    for diagnostic in diagnostics:
        LOG.warning(diagnostic)
    conversion.diagnostics += diagnostics
    for file in files:
        file.write()
    return [file.file_path for file in files]
