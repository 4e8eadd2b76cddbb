#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Functions to normalize the docker-compose service properties (ports, environment, volumes, deploy resources)
"""

from __future__ import annotations

import re
from os import path

from compose_x_common.compose_x_common import keyisset, set_else_none

from quix_composex.common.logging import LOG

NUMBERS_REG = r"[^0-9.]"
MINIMUM_SUPPORTED = 4
DEFAULT_DOCKERFILE = "Dockerfile"
PUBLISHED_HOST_RE = re.compile(
    r"^(?:\[[^\]]*\]|\d{1,3}(?:\.\d{1,3}){3}):(?P<published>.+)$"
)
PORT_RE = re.compile(r"^(?:(?P<published>.+):)?(?P<target>[^:]+)$")
NUMBERS_ONLY_RE = re.compile(r"^\d+$")


def set_published_port(published):
    """
    The published port is never deployed, Quix routes public traffic to the container port.
    Numbers are returned as int, ranges and variables interpolation as-is.
    """
    if isinstance(published, int):
        return published
    published = str(published)
    host_match = PUBLISHED_HOST_RE.match(published)
    if host_match:
        published = host_match.group("published")
    if NUMBERS_ONLY_RE.match(published):
        return int(published)
    LOG.debug(f"Published port {published} is not a number, ignored")
    return published


def set_port_from_str(port: str):
    """
    Function to filter out port string and define published port, target port and protocol.
    Only the target port is validated.

    :param str port:
    :return: the ports parameters
    :rtype: tuple
    """
    if r"/" in port:
        port, protocol = port.rsplit(r"/", 1)
        if protocol not in ["udp", "tcp"]:
            raise ValueError(
                "Protocol", protocol, "is not valid. Must be one of", ["udp", "tcp"]
            )
    else:
        protocol = "tcp"
    parts = PORT_RE.match(port)
    if not parts:
        raise ValueError("port is not valid", port)
    target = parts.group("target")
    published = set_else_none("published", parts.groupdict(), target)
    if r"-" in target:
        raise ValueError(
            "Range target ports are not supported for Quix deployments", port
        )
    if not NUMBERS_ONLY_RE.match(target):
        raise ValueError("target port is not valid", target)
    if not (1 <= int(target) < (2**16)):
        raise ValueError(f"target port {target} is not between 1 and 65535")
    return set_published_port(published), int(target), protocol


def set_service_ports(ports: list) -> list[dict]:
    """Function to define common structure to ports

    :return: list of ports the service uses formatted according to dict
    :rtype: list
    """
    service_ports = []
    for port in ports:
        if not isinstance(port, (str, dict, int)):
            raise TypeError(
                "ports must be of types", dict, "or", str, "or", int, "got", type(port)
            )
        if isinstance(port, str):
            parts = set_port_from_str(port)
            service_ports.append(
                {
                    "protocol": parts[2],
                    "published": parts[0],
                    "target": parts[1],
                }
            )
        elif isinstance(port, dict):
            if not keyisset("target", port):
                raise ValueError("The ports must always at least define the target.")
            service_ports.append(
                {
                    "protocol": set_else_none("protocol", port, "tcp"),
                    "published": set_published_port(
                        set_else_none("published", port, port["target"])
                    ),
                    "target": int(port["target"]),
                }
            )
        elif isinstance(port, int):
            service_ports.append(
                {
                    "protocol": "tcp",
                    "published": port,
                    "target": port,
                }
            )
    return service_ports


def set_environment_dict_from_list(environment: list) -> dict:
    """
    Transforms a list of string with a ``key=value`` into a dict of key/value.
    A ``key`` without ``=`` has no value in the compose file, the value is then None.
    """
    env_vars_to_map = {}
    for key in environment:
        if not isinstance(key, str):
            raise TypeError(
                f"Environment variable {key} must be a string in the Key=Value format"
            )
        if key.find(r"=") < 0:
            var_name, var_value = key, None
        else:
            var_name, var_value = key.split(r"=", 1)
        if not var_name:
            raise TypeError(f"Environment variable {key} has no name")
        if var_name in env_vars_to_map:
            LOG.warning(f"{var_name} was already defined. Overriding to newer value")
        env_vars_to_map[var_name] = var_value
    return env_vars_to_map


def env_value_to_str(value):
    """YAML may give booleans or numbers for environment values, compose treats them as strings"""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def import_env_variables(environment) -> dict:
    """
    Function to import Docker compose env variables into an ordered mapping of name to value

    :param environment: Environment variables as defined on the service definition
    :type environment: dict or list
    :return: env vars
    :rtype: dict
    """
    if environment is None:
        return {}
    if isinstance(environment, list):
        return set_environment_dict_from_list(environment)
    elif isinstance(environment, dict):
        return {
            str(key): env_value_to_str(value) for key, value in environment.items()
        }
    raise TypeError(
        "Environment must be a list of string or a dict of key/value where value is a string"
    )


def read_env_file(file_path: str) -> dict:
    """
    Reads a docker env_file. Ignores blank lines and comments, strips matching quotes.

    :param str file_path: path to the env file
    :rtype: dict
    """
    env_vars = {}
    with open(file_path) as env_fd:
        for line in env_fd:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith("export "):
                line = line[len("export ") :].strip()
            if line.find("=") < 0:
                env_vars[line] = None
                continue
            key, value = line.split("=", 1)
            value = value.strip()
            if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
                value = value[1:-1]
            env_vars[key.strip()] = value
    return env_vars


def import_env_files(env_files, base_dir: str = None) -> dict:
    """
    Function to merge all the env_file of a service, last file wins.

    :param env_files: the env_file property, string or list of string / dict with path
    :param str base_dir: directory the compose file is in, relative paths resolve from there.
    :rtype: dict
    """
    if not env_files:
        return {}
    if isinstance(env_files, (str, dict)):
        env_files = [env_files]
    env_vars = {}
    for env_file in env_files:
        required = True
        if isinstance(env_file, dict):
            required = set_else_none("required", env_file, True, True)
            env_file = env_file["path"]
        file_path = (
            env_file
            if path.isabs(env_file) or base_dir is None
            else path.join(base_dir, env_file)
        )
        if not path.exists(file_path):
            if required:
                raise FileNotFoundError("env_file not found", file_path)
            LOG.debug(f"Optional env_file {file_path} not found. Skipping")
            continue
        env_vars.update(read_env_file(file_path))
    return env_vars


def import_volumes(volumes: list) -> list[tuple]:
    """
    Function to normalize the service volumes into (source, target) tuples.
    Anonymous volumes have no source.

    :param list volumes:
    :rtype: list[tuple]
    """
    mounts = []
    if not volumes:
        return mounts
    for volume in volumes:
        if isinstance(volume, str):
            parts = volume.split(r":")
            if len(parts) == 1:
                mounts.append((None, parts[0]))
            else:
                mounts.append((parts[0], parts[1]))
        elif isinstance(volume, dict):
            if not keyisset("target", volume):
                raise KeyError("Volume definition must define target", volume)
            mounts.append((set_else_none("source", volume), volume["target"]))
        else:
            raise TypeError(
                "volumes must be of type", str, "or", dict, "got", type(volume)
            )
    return mounts


def import_build(build) -> tuple:
    """
    Function to get the build context and Dockerfile from the build property

    :param build: string with context path, or dict with context/dockerfile
    :return: context, dockerfile
    :rtype: tuple
    """
    if not build:
        return None, None
    if isinstance(build, str):
        return build, DEFAULT_DOCKERFILE
    if isinstance(build, dict):
        return (
            set_else_none("context", build, "."),
            set_else_none("dockerfile", build, DEFAULT_DOCKERFILE),
        )
    raise TypeError("build must be of type", str, "or", dict, "got", type(build))


def handle_bytes_units(value, factor):
    """
    Function to handle KB use-case
    """
    amount = float(re.sub(NUMBERS_REG, "", value))
    if factor == pow(2, 10):
        unit = "KBytes"
    elif factor == pow(pow(2, 10), 2):
        unit = "Bytes"
    else:
        raise ValueError(
            "Factor is not valid.",
            factor,
            "Must be one of",
            [pow(2, 10), pow(pow(2, 10), 2)],
        )
    if amount < (MINIMUM_SUPPORTED * factor):
        LOG.warning(
            f"You set unit to {unit} and value is lower than {MINIMUM_SUPPORTED}MB. "
            "Setting to minimum supported by Docker"
        )
        return MINIMUM_SUPPORTED
    else:
        final_amount = int(amount / factor)
    return final_amount


def set_memory_to_mb(value) -> int:
    """
    Returns the value of MB. If no unit set, assuming MB
    :param value: the string value
    :rtype: int
    """
    if isinstance(value, int):
        return handle_bytes_units(str(value), pow(pow(2, 10), 2))
    value = value.strip()
    b_pat = re.compile(r"(^[0-9.]+(b|B)$)")
    kb_pat = re.compile(r"(^[0-9.]+(k|kb|kB|Kb|K|KB)$)")
    mb_pat = re.compile(r"(^[0-9.]+(m|mb|mB|Mb|M|MB)?$)")
    gb_pat = re.compile(r"(^[0-9.]+(g|gb|gB|Gb|G|GB)$)")
    if b_pat.findall(value):
        final_amount = handle_bytes_units(value, pow(pow(2, 10), 2))
    elif kb_pat.findall(value):
        final_amount = handle_bytes_units(value, pow(2, 10))
    elif mb_pat.findall(value):
        final_amount = int(float(re.sub(NUMBERS_REG, "", value)))
    elif gb_pat.findall(value):
        final_amount = int(float(re.sub(NUMBERS_REG, "", value)) * pow(2, 10))
    else:
        raise ValueError(f"Could not parse {value} to units")
    LOG.debug(f"Computed memory for {value}: {final_amount}MB")
    return int(final_amount)


def set_cpus_to_millicores(value) -> int:
    """
    Returns the CPU amount in millicores, from the docker compose cpus value (i.e. 0.5 gives 500)

    :param value: the cpus value, str or number
    :rtype: int
    """
    try:
        return int(round(float(value) * 1000))
    except (TypeError, ValueError):
        raise ValueError(f"Could not parse cpus value {value}")


def import_deploy_resources(deploy: dict) -> tuple:
    """
    Function to analyze the Docker Compose deploy attribute and returns the CPU and RAM to use.
    The highest of limits and reservations is used.

    :param dict deploy: definition['deploy']
    :return: cpu millicores, memory MB. None when not defined
    :rtype: tuple
    """
    if not keyisset("resources", deploy):
        return None, None
    resources = deploy["resources"]
    cpus = "cpus"
    memory = "memory"
    cpu_values = []
    mem_values = []
    for section in ("limits", "reservations"):
        if not keyisset(section, resources):
            continue
        if keyisset(cpus, resources[section]):
            cpu_values.append(set_cpus_to_millicores(resources[section][cpus]))
        if keyisset(memory, resources[section]):
            mem_values.append(set_memory_to_mb(resources[section][memory]))
    return (
        max(cpu_values) if cpu_values else None,
        max(mem_values) if mem_values else None,
    )
