"""
Manipulates the test data used by the Elasticsearch connector integration tests.

This is independent from the tests so that for read tests the data set can be created
once, right after the data store is up, instead of on every run (which is more fragile):

    estester populate --elasticsearch-server 1.2.3.4 --elasticsearch-http-port 9200

Write tests use an index suffixed with a per-run id, so parallel runs against the same
cluster never write into each other's index.
"""

import re
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from elasticsearch import Elasticsearch
from opentelemetry import trace

from estester import estester
from estester.base_logger import logger
from estester.options import (
    ACTION_DELETE,
    ACTION_POPULATE,
    ConnectionOptions,
    build_parser,
    connection_options_from_args,
)

TRACER = trace.get_tracer("estester")

ES_INDEX = "beam"
ES_TYPE = "test"
NUM_DOCS = 60_000
AVERAGE_DOC_SIZE = 25
MAX_DOC_SIZE = 35

INVALID_INDEX_CHARS = re.compile(r"[\\/*?\"<>| ,#:]")
INVALID_INDEX_PREFIXES = ("-", "_", "+")
MAX_INDEX_NAME_BYTES = 255


class Mode(Enum):
    """Whether an index is used by the read tests or by the write tests."""

    READ = "read"
    WRITE = "write"


def current_milliseconds() -> int:
    return int(round(time.time() * 1000))


def validate_index_name(name: str):
    """Rejects names Elasticsearch would refuse, before anything is sent to the cluster."""
    if name != name.lower():
        raise ValueError(f"Invalid index name '{name}': must be lowercase")
    if name in (".", "..") or name.startswith(INVALID_INDEX_PREFIXES):
        raise ValueError(f"Invalid index name '{name}': can't be . or .. or start with -, _ or +")
    if INVALID_INDEX_CHARS.search(name):
        raise ValueError(f"Invalid index name '{name}': can't contain any of \\ / * ? \" < > | , # : or spaces")
    if len(name.encode("utf-8")) > MAX_INDEX_NAME_BYTES:
        raise ValueError(f"Invalid index name '{name}': longer than {MAX_INDEX_NAME_BYTES} bytes")


@dataclass(frozen=True)
class DocumentSpec:
    count: int = NUM_DOCS
    # sizes in bytes, used by the connector tests to estimate batch sizes
    average_size: int = AVERAGE_DOC_SIZE
    max_size: int = MAX_DOC_SIZE


@dataclass(frozen=True)
class FixtureConfig:
    read_index: str = ES_INDEX
    document_type: str = ES_TYPE
    documents: DocumentSpec = field(default_factory=DocumentSpec)
    # Computed once, when the config is built. Two configs created within the same
    # millisecond collide, pass an explicit run id when that matters.
    run_id: str = field(default_factory=lambda: str(current_milliseconds()))

    def __post_init__(self):
        if not self.read_index:
            raise ValueError("read_index can't be empty")
        if not self.run_id:
            raise ValueError("run_id can't be empty, the write index would clash with the read index")
        # Elasticsearch index names must be lowercase
        object.__setattr__(self, "run_id", str(self.run_id).lower())
        validate_index_name(self.read_index)
        validate_index_name(self.read_index + self.run_id)


@dataclass
class ConnectionConfiguration:
    """What the connector under test needs to reach an index."""

    addresses: List[str]
    index: str
    type: str


class ElasticsearchTestDataSet:
    def __init__(self, config: Optional[FixtureConfig] = None):
        self.config = config if config is not None else FixtureConfig()
        self._index_names = {
            Mode.READ: self.config.read_index,
            Mode.WRITE: self.config.read_index + self.config.run_id,
        }

    @property
    def read_index(self) -> str:
        return self._index_names[Mode.READ]

    @property
    def write_index(self) -> str:
        return self._index_names[Mode.WRITE]

    def resolve_index_name(self, mode: Mode) -> str:
        return self._index_names[mode]

    @TRACER.start_as_current_span("create_and_populate")
    def create_and_populate(self, client: Elasticsearch, mode: Mode):
        """
        Creates the index for `mode` if it doesn't exist yet and fills it with the
        configured number of documents. Nothing is retried: any error raised by the
        client ends up with the caller.
        """
        index = self.resolve_index_name(mode)
        count = self.config.documents.count

        span = trace.get_current_span()
        span.set_attribute("estester.index", index)
        span.set_attribute("estester.mode", mode.value)
        span.set_attribute("estester.document_count", count)

        estester.create_index_if_absent(client, index)
        estester.insert_test_documents(client, index, count)

    @TRACER.start_as_current_span("delete_index")
    def delete_index(self, client: Elasticsearch, mode: Mode):
        index = self.resolve_index_name(mode)
        trace.get_current_span().set_attribute("estester.index", index)

        estester.delete_index(client, index)

    def connection_configuration(self, options: ConnectionOptions, mode: Mode) -> ConnectionConfiguration:
        return ConnectionConfiguration(
            addresses=[options.http_address()],
            index=self.resolve_index_name(mode),
            type=self.config.document_type,
        )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    options = connection_options_from_args(args)
    mode = Mode(args.mode)

    config = FixtureConfig(run_id=args.run_id) if args.run_id is not None else FixtureConfig()
    data_set = ElasticsearchTestDataSet(config)
    client = estester.build_client(options)

    index = data_set.resolve_index_name(mode)
    try:
        if args.action == ACTION_POPULATE:
            data_set.create_and_populate(client, mode)
            logger.info(f"Index {index} populated with {config.documents.count} documents")
        elif args.action == ACTION_DELETE:
            data_set.delete_index(client, mode)
    finally:
        client.close()

    return 0
