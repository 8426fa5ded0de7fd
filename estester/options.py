import argparse
import os
from dataclasses import dataclass
from typing import List, Optional

DEFAULT_HTTP_PORT = 9200
DEFAULT_TCP_PORT = 9300

ENV_SERVER = "ELASTICSEARCH_SERVER"
ENV_HTTP_PORT = "ELASTICSEARCH_HTTP_PORT"
ENV_TCP_PORT = "ELASTICSEARCH_TCP_PORT"
ENV_RUN_ID = "ES_TEST_RUN_ID"

ACTION_POPULATE = "populate"
ACTION_DELETE = "delete"


@dataclass
class ConnectionOptions:
    """Where the Elasticsearch cluster used by the integration tests lives."""

    server: str
    http_port: int = DEFAULT_HTTP_PORT
    tcp_port: int = DEFAULT_TCP_PORT

    def http_address(self) -> str:
        return f"http://{self.server}:{self.http_port}"


def get_env_var_or_default(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default

    value = value.strip()
    return value or default


def port_from_arg(value) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid port '{value}': must be an integer")

    if not 0 < port < 65536:
        raise ValueError(f"Invalid port '{value}': must be between 1 and 65535")
    return port


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="estester",
        description="Creates, populates and deletes the Elasticsearch indices used by the connector integration tests.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create and populate the read index once, before running read tests
  estester populate --elasticsearch-server 1.2.3.4 --elasticsearch-http-port 9200

  # Drop the write index of a given run
  estester delete --mode write --run-id 1700000000000
        """,
    )
    parser.add_argument(
        "action",
        nargs="?",
        choices=[ACTION_POPULATE, ACTION_DELETE],
        default=ACTION_POPULATE,
        help="What to do with the index (default: populate)",
    )
    parser.add_argument(
        "--mode",
        choices=["read", "write"],
        default="read",
        help="Which index to act on (default: read)",
    )
    parser.add_argument(
        "--elasticsearch-server",
        default=get_env_var_or_default(ENV_SERVER),
        help=f"Elasticsearch host, defaults to ${ENV_SERVER}",
    )
    parser.add_argument(
        "--elasticsearch-http-port",
        default=get_env_var_or_default(ENV_HTTP_PORT, str(DEFAULT_HTTP_PORT)),
        help=f"Elasticsearch HTTP port, defaults to ${ENV_HTTP_PORT} or {DEFAULT_HTTP_PORT}",
    )
    parser.add_argument(
        "--elasticsearch-tcp-port",
        default=get_env_var_or_default(ENV_TCP_PORT, str(DEFAULT_TCP_PORT)),
        help=f"Elasticsearch transport port, defaults to ${ENV_TCP_PORT} or {DEFAULT_TCP_PORT}",
    )
    parser.add_argument(
        "--run-id",
        default=get_env_var_or_default(ENV_RUN_ID),
        help=f"Suffix of the write index, defaults to ${ENV_RUN_ID} or the current time in milliseconds",
    )
    return parser


def connection_options_from_args(args) -> ConnectionOptions:
    if not args.elasticsearch_server:
        raise ValueError(f"Elasticsearch server is not set, pass --elasticsearch-server or set ${ENV_SERVER}")

    return ConnectionOptions(
        server=args.elasticsearch_server,
        http_port=port_from_arg(args.elasticsearch_http_port),
        tcp_port=port_from_arg(args.elasticsearch_tcp_port),
    )


def parse_options(argv: Optional[List[str]] = None) -> ConnectionOptions:
    return connection_options_from_args(build_parser().parse_args(argv))
