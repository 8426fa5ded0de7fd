# Re-exports
from .dataset import (
    ES_INDEX,
    ES_TYPE,
    NUM_DOCS,
    ConnectionConfiguration,
    DocumentSpec,
    ElasticsearchTestDataSet,
    FixtureConfig,
    Mode,
)
from .options import ConnectionOptions, parse_options
