#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Console script for quix_composex.
"""

import argparse
import logging
import sys

import yaml

from quix_composex import __version__
from quix_composex.common.files import write_project_files
from quix_composex.common.logging import LOG
from quix_composex.common.settings import QuixComposeSettings
from quix_composex.exceptions import ComposeFileError
from quix_composex.quix_composex import generate_project


class ArgparseHelper(argparse._HelpAction):
    """
    Used to help print top level '--help' arguments from argparse
    when used with subparsers
    """

    def __call__(self, parser, namespace, values, option_string=None):
        parser.print_help()
        print()
        subparsers_actions = [
            action
            for action in parser._actions
            if isinstance(action, argparse._SubParsersAction)
        ]
        for subparsers_action in subparsers_actions:
            for choice, subparser in list(subparsers_action.choices.items()):
                if choice in [
                    cmd["name"] for cmd in QuixComposeSettings.active_commands
                ] or choice in [
                    cmd["name"] for cmd in QuixComposeSettings.validation_commands
                ]:
                    print(f"Command '{choice}'")
                    print(subparser.format_usage())
        parser.exit()


def main_parser():
    """
    Console script for quix_composex.
    """
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument(
        "-h",
        "--help",
        action=ArgparseHelper,
        help="show this help message and exit",
    )

    cmd_parsers = parser.add_subparsers(
        dest=QuixComposeSettings.command_arg, help="Command to execute."
    )
    files_parser = argparse.ArgumentParser(add_help=False)
    output_parser = argparse.ArgumentParser(add_help=False)
    files_parser.add_argument(
        "-f",
        "--docker-compose-file",
        dest=QuixComposeSettings.input_file_arg,
        required=True,
        help="Path to the Docker compose file. Repeat to merge override files",
        action="append",
    )
    files_parser.add_argument(
        "--loglevel",
        type=str,
        help="Log level. Defaults to INFO",
        required=False,
        dest=QuixComposeSettings.loglevel_arg,
    )
    output_parser.add_argument(
        "-d",
        "--output-dir",
        required=False,
        help="Output directory to write quix.yaml and the applications folders to.",
        type=str,
        dest=QuixComposeSettings.output_dir_arg,
        default=QuixComposeSettings.default_output_dir,
    )
    for command in QuixComposeSettings.active_commands:
        cmd_parsers.add_parser(
            name=command["name"],
            help=command["help"],
            parents=[files_parser, output_parser],
        )
    for command in QuixComposeSettings.validation_commands:
        cmd_parsers.add_parser(
            name=command["name"], help=command["help"], parents=[files_parser]
        )

    for command in QuixComposeSettings.neutral_commands:
        cmd_parsers.add_parser(name=command["name"], help=command["help"])
    return parser


def set_loglevel(loglevel: str) -> None:
    valid_levels = [
        "FATAL",
        "CRITICAL",
        "ERROR",
        "WARNING",
        "WARN",
        "INFO",
        "DEBUG",
    ]
    if loglevel.upper() in valid_levels:
        LOG.setLevel(logging.getLevelName(loglevel.upper()))
        LOG.handlers[0].setLevel(logging.getLevelName(loglevel.upper()))
    else:
        print(f"Log level value {loglevel} is invalid. Must me one of {valid_levels}")


def main(argv: list = None):
    """
    Main entry point for CLI
    :return: status code
    """
    parser = main_parser()
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        parser.print_help()
        return 0
    args = parser.parse_args(argv)
    if args.command == QuixComposeSettings.version_arg:
        print("Quix Compose-X", __version__)
        return 0
    if getattr(args, QuixComposeSettings.loglevel_arg, None):
        set_loglevel(args.loglevel)
    LOG.debug(args)
    try:
        settings = QuixComposeSettings(**vars(args))
    except ComposeFileError as error:
        LOG.error(error)
        return 1
    LOG.debug(settings)
    conversion = generate_project(settings)
    if settings.no_write:
        print(yaml.safe_dump(conversion.project.to_dict(), sort_keys=False))
    else:
        write_project_files(conversion, settings.output_dir)
    return 0 if conversion.successful else 1


if __name__ == "__main__":
    sys.exit(main())  # pragma: no cover
