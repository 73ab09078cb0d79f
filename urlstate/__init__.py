"""urlstate: typed query state in URL query strings."""

from urlstate import core, exceptions, navigation, typing, utils
from urlstate.__metadata__ import __version__
from urlstate.core import (
    CacheConfig,
    QueryBuilder,
    QueryBuilderConfig,
    QueryParams,
    build_query,
    clear_url_state_caches,
    decode_value,
    encode_value,
    extract_params,
    get_cache_stats,
    get_query_from_url,
    query_builder,
    update_cache_config,
)
from urlstate.exceptions import ImproperConfigurationError, SerializationError, UrlStateError
from urlstate.navigation import (
    UpdateResult,
    apply_updates,
    build_location,
    delete_all_items,
    delete_items,
    should_remove_param,
)
from urlstate.typing import Empty

__all__ = (
    "CacheConfig",
    "Empty",
    "ImproperConfigurationError",
    "QueryBuilder",
    "QueryBuilderConfig",
    "QueryParams",
    "SerializationError",
    "UpdateResult",
    "UrlStateError",
    "__version__",
    "apply_updates",
    "build_location",
    "build_query",
    "clear_url_state_caches",
    "core",
    "decode_value",
    "delete_all_items",
    "delete_items",
    "encode_value",
    "exceptions",
    "extract_params",
    "get_cache_stats",
    "get_query_from_url",
    "navigation",
    "query_builder",
    "should_remove_param",
    "typing",
    "update_cache_config",
    "utils",
)
