"""
Pytest configuration & shared fixtures.
"""

import logging
from collections.abc import Iterator
from typing import Any

import pytest

from entitymap.config import get_settings
from entitymap.mappers.entity_mapper import EntityMapper, get_mapper


@pytest.fixture
def mapper() -> EntityMapper:
    """Lenient mapper (the default policy)."""
    return EntityMapper()


@pytest.fixture
def strict_mapper() -> EntityMapper:
    """Mapper validating scalar values against declared types."""
    return EntityMapper(strict_scalars=True)


@pytest.fixture
def user_data() -> dict[str, Any]:
    """Worked-example source map: Bob with his friend Alice."""
    return {
        "name": "Bob",
        "age": 30,
        "location": {"city": "Tampa"},
        "friend": {
            "name": "Alice",
            "age": 25,
            "location": {"city": "Miami"},
        },
    }


@pytest.fixture
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Clear cached settings / mapper so env changes take effect."""
    monkeypatch.delenv("ENTITY_MAPPER_STRICT_SCALARS", raising=False)
    get_settings.cache_clear()
    get_mapper.cache_clear()
    yield
    get_settings.cache_clear()
    get_mapper.cache_clear()


@pytest.fixture
def restore_root_logger() -> Iterator[logging.Logger]:
    """Put the root logger back the way it was after setup_logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
