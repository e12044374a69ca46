"""Protocol for persisted registry documents."""

from contextlib import AbstractContextManager
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RegistryStoreProtocol(Protocol):
    """Storage for one registry document (a JSON object).

    ``transaction()`` guards a read-modify-write sequence; implementations
    must serialize concurrent transactions on the same document.
    """

    def load(self) -> dict[str, Any]:
        """Return the whole document."""
        ...

    def save(self, data: dict[str, Any]) -> None:
        """Replace the whole document."""
        ...

    def transaction(self) -> AbstractContextManager[None]:
        """Context manager holding the document's write lock."""
        ...
