#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Non fatal findings of the conversion, reported to the user once all services are processed.
"""

from __future__ import annotations

from quix_composex.common.logging import LOG


class Diagnostic:
    """
    :ivar str service_name: the compose service the diagnostic is for
    :ivar str message:
    """

    def __init__(self, service_name: str, message: str):
        self.service_name = service_name
        self.message = message

    def __repr__(self):
        return f"services.{self.service_name} - {self.message}"

    def __eq__(self, other):
        if not isinstance(other, Diagnostic):
            return NotImplemented
        return (self.service_name, self.message) == (
            other.service_name,
            other.message,
        )

    def __hash__(self):
        return hash((self.service_name, self.message))


def report_diagnostics(diagnostics: list[Diagnostic]) -> None:
    """Logs all the diagnostics as warnings"""
    if not diagnostics:
        LOG.debug("No warnings to report")
        return
    LOG.warning(f"{len(diagnostics)} warning(s) raised during conversion")
    for diagnostic in diagnostics:
        LOG.warning(diagnostic)
