import os
from typing import List
from unittest.mock import MagicMock

import pytest
from elasticsearch import Elasticsearch, NotFoundError
from pytest import fixture

from estester import estester
from estester.dataset import FixtureConfig
from estester.options import ENV_HTTP_PORT, ENV_SERVER, ConnectionOptions, port_from_arg


def not_found_error(index: str) -> NotFoundError:
    return NotFoundError(f"no such index [{index}]", MagicMock(status=404), {"error": {"type": "index_not_found_exception"}})


def consume_actions(recorded: List):
    """Side effect for a patched `helpers.bulk`, keeps every action it is handed."""

    def bulk(client, actions, **kwargs):
        recorded.extend(actions)
        return len(recorded), []

    return bulk


@fixture
def es_client() -> MagicMock:
    client = MagicMock()
    client.indices.exists.return_value = False
    return client


@fixture(scope="session")
def connection_options() -> ConnectionOptions:
    server = os.getenv(ENV_SERVER)
    if not server:
        pytest.skip(f"{ENV_SERVER} must be set to run tests against Elasticsearch")

    return ConnectionOptions(server=server, http_port=port_from_arg(os.getenv(ENV_HTTP_PORT, "9200")))


@fixture(scope="session")
def fixture_config() -> FixtureConfig:
    return FixtureConfig(read_index="estester-it-")


@fixture(scope="module")
def live_client(connection_options: ConnectionOptions) -> Elasticsearch:
    client = estester.build_client(connection_options)
    yield client
    client.close()
