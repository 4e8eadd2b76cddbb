#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Load all the JSON Schema specification's
"""

import json
from os import listdir

from importlib_resources import files
from referencing import Resource


def _schemas():
    specs_folder = files("quix_composex").joinpath("specs")
    for spec_file in sorted(listdir(specs_folder)):
        if not spec_file.endswith(".spec.json"):
            continue
        with open(f"{specs_folder}/{spec_file}") as version_fd:
            contents = json.loads(version_fd.read())
        yield Resource.from_contents(contents)


def load_spec(spec_name: str) -> dict:
    """
    Returns the content of one of the JSON schemas

    :param str spec_name: the file name, i.e. compose.spec.json
    """
    return json.loads(files("quix_composex").joinpath("specs", spec_name).read_text())
