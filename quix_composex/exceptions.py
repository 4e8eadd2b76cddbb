#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Custom exceptions for quix-compose-x
"""


class ComposeBaseException(Exception):
    """
    Top class for Quix Compose-X Exceptions
    """

    def __init__(self, msg, *args):
        super().__init__(msg, *args)


class ComposeFileError(ComposeBaseException):
    """
    Exception when the docker-compose input cannot be read or does not match the compose schema
    """


class ValidationError(ComposeBaseException):
    """
    Exception when a compose service cannot be mapped to a Quix deployment.
    i.e. no build nor image, more than one port to expose, or duplicate application folder.
    """

    def __init__(self, msg, *args, service_name: str = None):
        super().__init__(msg, *args)
        self.service_name = service_name
