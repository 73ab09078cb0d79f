"""Query builder: turn extracted URL parameters into a typed query object.

The pipeline is defaults, then per-key ignore and mapping, then one
post-process over the whole result. Configuration is an immutable
:class:`QueryBuilderConfig`; :class:`QueryBuilder` swaps in updated copies as
it is configured, so nothing accumulates between ``build`` calls.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Generic, Optional, cast

from typing_extensions import Self

from urlstate.core.extract import extract_params
from urlstate.exceptions import ImproperConfigurationError
from urlstate.typing import MappingFunc, ParamSource, PostProcessFunc, QueryT
from urlstate.utils.type_guards import is_empty

__all__ = (
    "DEFAULT_QUERY_DEFAULTS",
    "QueryBuilder",
    "QueryBuilderConfig",
    "build_query",
    "get_query_from_url",
    "query_builder",
)

DEFAULT_QUERY_DEFAULTS: "Mapping[str, Any]" = MappingProxyType({"page": 1, "pageSize": 10})


@dataclass(frozen=True)
class QueryBuilderConfig:
    """Configuration for :func:`build_query`."""

    defaults: "Mapping[str, Any]" = field(default_factory=lambda: dict(DEFAULT_QUERY_DEFAULTS))
    """Values present before any parameter is read."""
    ignored: frozenset[str] = frozenset()
    """Parameter names dropped unconditionally."""
    mappings: "Mapping[str, MappingFunc]" = field(default_factory=dict)
    """Per-key transforms applied to incoming values."""
    post_process: Optional[PostProcessFunc] = None
    """Whole-result transform applied last."""

    def __post_init__(self) -> None:
        for name, mapper in self.mappings.items():
            if not callable(mapper):
                msg = f"Mapping for {name!r} must be callable, got {type(mapper).__name__}"
                raise ImproperConfigurationError(msg)
        if self.post_process is not None and not callable(self.post_process):
            msg = f"post_process must be callable, got {type(self.post_process).__name__}"
            raise ImproperConfigurationError(msg)


def build_query(params: "Mapping[str, Any]", config: Optional[QueryBuilderConfig] = None) -> "dict[str, Any]":
    """Build a query object from already extracted parameters.

    Args:
        params: Decoded parameters, e.g. from :func:`extract_params`. Not mutated.
        config: Builder configuration; the default seeds ``page`` and ``pageSize``.

    Returns:
        A new dict. Exceptions from mapping or post-process functions propagate.
    """
    if config is None:
        config = QueryBuilderConfig()

    result: dict[str, Any] = dict(config.defaults)
    for key, value in params.items():
        if is_empty(value) or key in config.ignored:
            continue
        mapper = config.mappings.get(key)
        result[key] = mapper(value) if mapper is not None else value

    if config.post_process is not None:
        result = config.post_process(result)
    return result


class QueryBuilder(Generic[QueryT]):
    """Configurable builder for processing URL state.

    Example::

        query = (
            QueryBuilder()
            .set_defaults({"pageSize": 25})
            .ignore("debug")
            .add_mapping("roles", ensure_list)
            .from_url(params, "users_")
        )
    """

    __slots__ = ("_config",)

    def __init__(
        self,
        config: Optional[QueryBuilderConfig] = None,
        *,
        defaults: "Optional[Mapping[str, Any]]" = None,
        ignored: "Optional[Iterable[str]]" = None,
        mappings: "Optional[Mapping[str, MappingFunc]]" = None,
        post_process: Optional[PostProcessFunc] = None,
    ) -> None:
        base = config if config is not None else QueryBuilderConfig()
        self._config = replace(
            base,
            defaults={**DEFAULT_QUERY_DEFAULTS, **base.defaults, **(defaults or {})},
            ignored=base.ignored | frozenset(ignored or ()),
            mappings={**base.mappings, **(mappings or {})},
            post_process=post_process if post_process is not None else base.post_process,
        )

    @property
    def config(self) -> QueryBuilderConfig:
        """Current configuration snapshot."""
        return self._config

    def set_defaults(self, defaults: "Optional[Mapping[str, Any]]" = None, **kwargs: Any) -> Self:
        """Merge new defaults over the existing ones; later calls win per key."""
        self._config = replace(self._config, defaults={**self._config.defaults, **(defaults or {}), **kwargs})
        return self

    def ignore(self, *properties: str) -> Self:
        """Add parameter names to ignore."""
        self._config = replace(self._config, ignored=self._config.ignored | frozenset(properties))
        return self

    def add_mapping(self, property_name: str, mapper: MappingFunc) -> Self:
        """Register the transform for a parameter, replacing any earlier one."""
        self._config = replace(self._config, mappings={**self._config.mappings, property_name: mapper})
        return self

    def set_post_process(self, post_process: Optional[PostProcessFunc]) -> Self:
        """Set the whole-result transform applied after all keys are processed."""
        self._config = replace(self._config, post_process=post_process)
        return self

    def build(self, params: "Mapping[str, Any]") -> QueryT:
        """Build a query from already-filtered parameters."""
        return cast("QueryT", build_query(params, self._config))

    def from_url(self, source: ParamSource, prefix: str = "") -> QueryT:
        """Extract parameters from a source and build the query."""
        return self.build(extract_params(source, prefix))

    def __repr__(self) -> str:
        config = self._config
        return (
            f"QueryBuilder(defaults={dict(config.defaults)!r}, ignored={sorted(config.ignored)!r}, "
            f"mappings={sorted(config.mappings)!r}, post_process={config.post_process is not None})"
        )


def get_query_from_url(
    source: ParamSource, prefix: str = "", builder: "Optional[QueryBuilder[Any]]" = None
) -> "dict[str, Any]":
    """Get a query object straight from URL state.

    This is what a request handler passes to its backend, e.g.
    ``list_users(get_query_from_url(request.query_params, "users_"))``.

    Args:
        source: Request query parameters.
        prefix: Namespace prefix of the state to read.
        builder: Builder to use; a default builder when omitted.

    Returns:
        The built query object.
    """
    if builder is None:
        builder = QueryBuilder()
    return cast("dict[str, Any]", builder.from_url(source, prefix))


def query_builder(params: "Mapping[str, Any]") -> "dict[str, Any]":
    """Build a query from pre-filtered parameters with the default builder."""
    return cast("dict[str, Any]", QueryBuilder().build(params))
