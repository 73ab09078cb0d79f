from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from urlstate.core.cache import CacheConfig, update_cache_config

here = Path(__file__).parent
root_path = here.parent


@pytest.fixture(autouse=True)
def fresh_url_state_caches() -> Iterator[None]:
    update_cache_config(CacheConfig())
    yield
    update_cache_config(CacheConfig())


@pytest.fixture(autouse=True)
def restore_urlstate_logger() -> Iterator[None]:
    logger = logging.getLogger("urlstate")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
