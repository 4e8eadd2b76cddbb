#   -*- coding: utf-8 -*-
#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2021 John Mille <john@compose-x.io>

from os import path

from pytest import fixture, raises

from quix_composex.common import slugify
from quix_composex.compose.compose_services.helpers import (
    import_build,
    import_deploy_resources,
    import_env_files,
    import_env_variables,
    import_volumes,
    set_memory_to_mb,
    set_port_from_str,
    set_service_ports,
)


@fixture
def here():
    return path.abspath(path.dirname(__file__))


def test_valid_ports():

    ports_check = {
        "8080": {0: 8080, 1: 8080, 2: "tcp"},
        "8081:80": {0: 8081, 1: 80, 2: "tcp"},
        "22/udp": {0: 22, 1: 22, 2: "udp"},
        "4242:21/udp": {0: 4242, 1: 21, 2: "udp"},
        "127.0.0.1:8000:3000": {0: 8000, 1: 3000, 2: "tcp"},
        "8000-8010:80": {0: "8000-8010", 1: 80, 2: "tcp"},
        "${API_PORT:-8080}:3000": {0: "${API_PORT:-8080}", 1: 3000, 2: "tcp"},
        "127.0.0.1:${API_PORT}:3000/udp": {0: "${API_PORT}", 1: 3000, 2: "udp"},
    }
    for port_str, expectation in ports_check.items():
        result = set_port_from_str(port_str)
        for check_id in [0, 1, 2]:
            assert expectation[check_id] == result[check_id]


def test_invalid_ports():

    invalid_ports = [
        "8080/icmp",
        "abcd",
        "1234567/udp",
        "80-90:80-90",
        "8000:80-90",
        "8080:${PORT}",
    ]
    for port_str in invalid_ports:
        with raises(ValueError):
            set_port_from_str(port_str)


def test_service_ports():
    ports = set_service_ports([3000, "8080:80", {"target": 5000, "published": 5001}])
    assert [port["target"] for port in ports] == [3000, 80, 5000]
    assert ports[2]["published"] == 5001
    ports = set_service_ports(
        ["${API_PORT}:3000", {"target": 3000, "published": "8000-8001"}]
    )
    assert [port["target"] for port in ports] == [3000, 3000]
    assert [port["published"] for port in ports] == ["${API_PORT}", "8000-8001"]
    with raises(ValueError):
        set_service_ports([{"published": 80}])
    with raises(TypeError):
        set_service_ports([[80]])


def test_environment_import():
    assert import_env_variables(["A=1", "B=x=y", "C"]) == {
        "A": "1",
        "B": "x=y",
        "C": None,
    }
    assert import_env_variables({"A": 1, "B": True, "C": None, "D": "d"}) == {
        "A": "1",
        "B": "true",
        "C": None,
        "D": "d",
    }
    assert import_env_variables(None) == {}
    with raises(TypeError):
        import_env_variables("A=1")
    with raises(TypeError):
        import_env_variables([1])
    with raises(TypeError):
        import_env_variables(["=x"])


def test_env_files(here):
    base_dir = f"{here}/../use-cases/blog"
    env_vars = import_env_files("./worker/worker.env", base_dir)
    assert env_vars == {
        "CONCURRENCY": "4",
        "QUEUE_NAME": "default",
        "SMTP_PASSWORD": "s3cr3t",
    }
    assert (
        import_env_files([{"path": "./missing.env", "required": False}], base_dir)
        == {}
    )
    with raises(FileNotFoundError):
        import_env_files(["./missing.env"], base_dir)


def test_volumes():
    volumes = import_volumes(
        [
            "./data:/data:ro",
            "/var/cache",
            {"type": "volume", "source": "db", "target": "/db"},
        ]
    )
    assert volumes == [("./data", "/data"), (None, "/var/cache"), ("db", "/db")]
    with raises(KeyError):
        import_volumes([{"source": "db"}])


def test_build():
    assert import_build("./api") == ("./api", "Dockerfile")
    assert import_build({"context": "./w", "dockerfile": "Dockerfile.w"}) == (
        "./w",
        "Dockerfile.w",
    )
    assert import_build({"dockerfile": "Dockerfile.w"}) == (".", "Dockerfile.w")
    assert import_build(None) == (None, None)


def test_memory_units():
    tests = [
        ("512m", 512),
        ("512M", 512),
        ("512", 512),
        ("1g", 1024),
        ("1.5GB", 1536),
        ("2048k", 4),
    ]
    for value, expected in tests:
        assert set_memory_to_mb(value) == expected, value
    assert set_memory_to_mb(512 * pow(2, 20)) == 512
    with raises(ValueError):
        set_memory_to_mb("12 parsecs")


def test_deploy_resources():
    assert import_deploy_resources({}) == (None, None)
    assert import_deploy_resources(
        {
            "resources": {
                "limits": {"cpus": "0.5", "memory": "1G"},
                "reservations": {"cpus": 0.25, "memory": "256M"},
            }
        }
    ) == (500, 1024)
    assert import_deploy_resources({"resources": {"limits": {"cpus": 2}}}) == (
        2000,
        None,
    )


def test_slugify():
    assert slugify("api") == "api"
    assert slugify("My_API.v2") == "my-api-v2"
    assert slugify("__x__") == "x"
    with raises(TypeError):
        slugify(None)
