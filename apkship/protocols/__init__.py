"""Protocol definitions for apkship adapters and interfaces.

The protocols use typing.Protocol with @runtime_checkable so that both static
type checkers and isinstance() checks accept test doubles.
"""

from .file_adapter_protocol import FileAdapterProtocol
from .registry_store_protocol import RegistryStoreProtocol


__all__ = [
    "FileAdapterProtocol",
    "RegistryStoreProtocol",
]
