"""urlstate core - value codec, caches, extraction and query building.

Architecture Overview:
- serialization.py: structural text format for composite values
- codec.py: encode_value / decode_value with primitive fast paths
- cache.py: bounded encode, decode and source caches
- params.py: QueryParams, the canonical parameter source
- extract.py: prefix filtering and decoding of parameter sources
- builder.py: QueryBuilder and the pure build_query pipeline
- mappings.py: reusable mapping and post-process functions
"""

from urlstate.core import mappings
from urlstate.core.builder import (
    DEFAULT_QUERY_DEFAULTS,
    QueryBuilder,
    QueryBuilderConfig,
    build_query,
    get_query_from_url,
    query_builder,
)
from urlstate.core.cache import (
    CacheConfig,
    CacheStats,
    CacheStatsSnapshot,
    clear_url_state_caches,
    get_cache_config,
    get_cache_stats,
    log_cache_stats,
    update_cache_config,
)
from urlstate.core.codec import decode_value, encode_value
from urlstate.core.extract import extract_params
from urlstate.core.params import QueryParams
from urlstate.core.serialization import STRUCTURAL_MARKER, from_text, to_text

__all__ = (
    "DEFAULT_QUERY_DEFAULTS",
    "STRUCTURAL_MARKER",
    "CacheConfig",
    "CacheStats",
    "CacheStatsSnapshot",
    "QueryBuilder",
    "QueryBuilderConfig",
    "QueryParams",
    "build_query",
    "clear_url_state_caches",
    "decode_value",
    "encode_value",
    "extract_params",
    "from_text",
    "get_cache_config",
    "get_cache_stats",
    "get_query_from_url",
    "log_cache_stats",
    "mappings",
    "query_builder",
    "to_text",
    "update_cache_config",
)
