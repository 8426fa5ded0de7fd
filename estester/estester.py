from typing import Callable, Dict, Iterator, Optional

from elasticsearch import Elasticsearch, helpers

from estester.base_logger import logger
from estester.options import ConnectionOptions

SCIENTISTS = [
    "Einstein",
    "Darwin",
    "Copernicus",
    "Pasteur",
    "Curie",
    "Faraday",
    "Newton",
    "Bohr",
    "Galilei",
    "Maxwell",
]

BULK_CHUNK_SIZE = 1_000
PROGRESS_EVERY = 10_000
REQUEST_TIMEOUT = 120


def build_client(options: ConnectionOptions, **kwargs) -> Elasticsearch:
    kwargs.setdefault("request_timeout", REQUEST_TIMEOUT)
    logger.info(f"Connecting to Elasticsearch at {options.http_address()} (transport port {options.tcp_port})")
    return Elasticsearch(options.http_address(), **kwargs)


def generate_scientist_document(i: int) -> Dict:
    """Generates a small document with a scientist name and a sequential id."""
    return {"scientist": SCIENTISTS[i % len(SCIENTISTS)], "id": i}


def _index_actions(index: str, count: int, generation_function: Callable[[int], Dict]) -> Iterator[Dict]:
    for a in range(count):
        # fixed ids, so populating an existing index overwrites instead of appending
        yield {"_index": index, "_id": str(a), "_source": generation_function(a)}
        if (a + 1) % PROGRESS_EVERY == 0:
            logger.debug(f"Queued {a + 1} documents for {index}")


def insert_test_documents(
    client: Elasticsearch,
    index: str,
    count: int,
    generation_function: Optional[Callable[[int], Dict]] = None,
) -> int:
    """
    Generates `count` documents and bulk inserts them into `index`, which is created
    on the fly if it doesn't exist. The index is refreshed afterwards so the documents
    are visible to searches straight away.

    A partial failure raises `elasticsearch.helpers.BulkIndexError`.
    """
    if generation_function is None:
        generation_function = generate_scientist_document

    logger.info(f"Inserting {count} test documents into {index}")

    indexed, _ = helpers.bulk(
        client,
        _index_actions(index, count, generation_function),
        chunk_size=BULK_CHUNK_SIZE,
    )
    client.indices.refresh(index=index)

    logger.info(f"Finished, {indexed} documents inserted into {index}")
    return indexed


def index_exists(client: Elasticsearch, index: str) -> bool:
    return bool(client.indices.exists(index=index))


def create_index_if_absent(client: Elasticsearch, index: str) -> bool:
    """Returns True if the index had to be created."""
    if index_exists(client, index):
        logger.debug(f"Index {index} already exists")
        return False

    client.indices.create(index=index)
    logger.info(f"Created index {index}")
    return True


def refresh_and_count(client: Elasticsearch, index: str) -> int:
    client.indices.refresh(index=index)
    return client.count(index=index)["count"]


def count_by_scientist_name(client: Elasticsearch, index: str, name: str) -> int:
    return client.count(index=index, query={"match": {"scientist": name}})["count"]


def delete_index(client: Elasticsearch, index: str):
    """Deletes `index`. A missing index raises `elasticsearch.NotFoundError`."""
    client.indices.delete(index=index)
    logger.info(f"Deleted index {index}")
