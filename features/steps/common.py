#  -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2021 John Mille <john@compose-x.io>

from os import path
from tempfile import TemporaryDirectory

from behave import given, then

from quix_composex.common.files import write_project_files
from quix_composex.common.settings import QuixComposeSettings
from quix_composex.quix.quix_variables import SECRET
from quix_composex.quix_composex import generate_project


def here():
    return path.abspath(path.dirname(__file__))


def get_deployment(context, name):
    for deployment in context.conversion.project.deployments:
        if deployment.name == name:
            return deployment
    raise KeyError(name, "not in", context.conversion.project.deployments)


@given("I use {file_path} as my docker-compose file")
def step_impl(context, file_path):
    """
    Function to import the Docker file from use-cases.

    :param context:
    :param str file_path:
    :return:
    """
    cases_path = path.abspath(f"{here()}/../../{file_path}")
    context.settings = QuixComposeSettings(
        **{
            QuixComposeSettings.command_arg: QuixComposeSettings.render_arg,
            QuixComposeSettings.input_file_arg: [cases_path],
        },
    )
    context.conversion = generate_project(context.settings)


@given(
    "I use {file_path} as my docker-compose file and {override_file} as override file"
)
def step_impl(context, file_path, override_file):
    files = [
        path.abspath(f"{here()}/../../{file_path}"),
        path.abspath(f"{here()}/../../{override_file}"),
    ]
    context.settings = QuixComposeSettings(
        **{
            QuixComposeSettings.command_arg: QuixComposeSettings.render_arg,
            QuixComposeSettings.input_file_arg: files,
        },
    )
    context.conversion = generate_project(context.settings)


@then("I convert all services successfully")
def step_impl(context):
    assert context.conversion.successful, context.conversion.failures
    assert len(context.conversion.results) == len(context.settings.services)


@then("services {names} fail to convert")
def step_impl(context, names):
    assert sorted(context.conversion.failures.keys()) == sorted(names.split(","))


@then("deployment {name} has public access enabled")
def step_impl(context, name):
    deployment = get_deployment(context, name)
    assert deployment.public_access.enabled
    assert deployment.port == 80


@then("deployment {name} has no public access")
def step_impl(context, name):
    assert get_deployment(context, name).public_access is None


@then("deployment {name} has {replicas:d} replicas")
def step_impl(context, name, replicas):
    assert get_deployment(context, name).resources.replicas == replicas


@then("variable {variable_name} of {name} is a required secret without value")
def step_impl(context, variable_name, name):
    variables = {
        variable.name: variable for variable in get_deployment(context, name).variables
    }
    variable = variables[variable_name]
    assert variable.input_type == SECRET
    assert variable.required
    assert variable.value is None
    assert variable.secret_key


@then("project has topics {topics}")
def step_impl(context, topics):
    assert list(context.conversion.project.topics) == topics.split(",")


@then("I render all files to verify execution")
def step_impl(context):
    with TemporaryDirectory() as output_dir:
        written = write_project_files(context.conversion, output_dir)
        for file_path in written:
            assert path.exists(file_path), file_path
