from __future__ import annotations

from typing import Any, Mapping, Protocol

from .models import AttributeSet


class EntityFactory(Protocol):
    """Builds the synchronization engine's object for one user."""

    def __call__(self, main_identifier: str, attributes: AttributeSet) -> Any: ...


class SourceService(Protocol):
    """Protocol for a read-only identity source used by the synchronization engine.

    Implementations answer two questions: which pivots exist, and what is
    known about the entity behind one of them.
    """

    def get_bean(
        self,
        pivot_attribute_name: str,
        pivot_attributes: Mapping[str, Any],
        from_same_service: bool,
    ) -> Any | None:
        """Return the entity matching ``pivot_attributes``, or None."""
        raise NotImplementedError

    def get_list_pivots(self) -> Mapping[str, AttributeSet]:
        """Return every pivot value with its attribute set."""
        raise NotImplementedError
