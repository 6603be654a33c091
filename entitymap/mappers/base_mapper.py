"""
Abstract base mapper.

Every mapper implements ``from_map`` and ``to_map`` for a single record;
``from_many`` and ``to_many`` provide batch behaviour on top. This keeps
the contract symmetric across mapping strategies.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any, Generic, TypeVar

EntityT = TypeVar("EntityT")


class BaseMapper(ABC, Generic[EntityT]):
    """Contract that every entity mapper must fulfil."""

    @abstractmethod
    def from_map(self, target_type: type[EntityT], source: Mapping[str, Any]) -> EntityT:
        """
        Build a populated instance of ``target_type`` from ``source``.

        Raises:
            EntityError: If the source cannot be mapped onto the type.
        """
        ...

    @abstractmethod
    def to_map(self, instance: EntityT) -> dict[str, Any]:
        """
        Return a freshly built map of the instance's public fields.

        Raises:
            EntityError: If the instance cannot be represented as a map.
        """
        ...

    def from_many(
        self, target_type: type[EntityT], sources: Iterable[Mapping[str, Any]]
    ) -> list[EntityT]:
        """
        Build one instance per source map.

        Override for optimised bulk behaviour; default iterates one-by-one.
        """
        return [self.from_map(target_type, s) for s in sources]

    def to_many(self, instances: Iterable[EntityT]) -> list[dict[str, Any]]:
        """Map a batch of instances; default iterates one-by-one."""
        return [self.to_map(i) for i in instances]
