"""
sigmat Config - Storage and Debug Configuration

Provides property-based configuration for matrix construction and buffer
checks. Settings apply to objects created after the change; existing
matrices keep the buffer they were built with.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, TYPE_CHECKING

if TYPE_CHECKING:
    from .buffer import BackingBuffer, BufferRegistry

logger = logging.getLogger("sigmat.config")


def _default_registry() -> "BufferRegistry":
    from .buffer._registry import BufferRegistry
    return BufferRegistry.with_defaults()


# =============================================================================
# Configuration Classes
# =============================================================================

@dataclass
class StorageConfig:
    """Configuration for storage matrices built without an explicit buffer."""
    buffer: str = 'float'          # Registry name of the default buffer
    direct: bool = False           # Allocate buffers in native memory
    zero_padded: bool = False      # Default zero padding of new matrices
    dtype: str = 'float64'         # Element type of float buffers
    registry: "BufferRegistry" = field(default_factory=_default_registry, repr=False)

    def new_buffer(self) -> "BackingBuffer":
        """Create an unallocated buffer according to this configuration."""
        return self.registry.create(self.buffer, direct=self.direct, dtype=self.dtype)


@dataclass
class ComputeConfig:
    """Configuration for generic matrix computations."""
    hash_diagonal_limit: int = 100  # Diagonal elements folded into hash()


@dataclass
class DebugConfig:
    """Configuration for fail-fast buffer checks."""
    check_allocation: bool = True  # Reject use before/after allocate()
    check_index: bool = True       # Reject linear indices outside [0, size)


# =============================================================================
# Global Configuration Manager
# =============================================================================

class SigmatConfig:
    """
    Global configuration manager for sigmat.

    Provides thread-local configuration with context manager support.
    Configuration can be set globally or locally within a context.

    Example:
        # Global configuration
        sigmat.config.storage = StorageConfig(buffer='signed_byte')

        # Local configuration (context manager)
        with sigmat.config.local(storage=StorageConfig(direct=True)):
            mat = FullMatrix(128, 128)   # natively allocated
        # Back to global config
    """

    def __init__(self):
        self._global_storage = StorageConfig()
        self._global_compute = ComputeConfig()
        self._global_debug = DebugConfig()

        # Thread-local storage for context overrides
        self._local = threading.local()

    # -------------------------------------------------------------------------
    # Property Accessors (with thread-local override support)
    # -------------------------------------------------------------------------

    @property
    def storage(self) -> StorageConfig:
        """Get storage configuration."""
        if getattr(self._local, "storage", None) is not None:
            return self._local.storage
        return self._global_storage

    @storage.setter
    def storage(self, value: StorageConfig):
        """Set global storage configuration."""
        self._global_storage = value

    @property
    def compute(self) -> ComputeConfig:
        """Get compute configuration."""
        if getattr(self._local, "compute", None) is not None:
            return self._local.compute
        return self._global_compute

    @compute.setter
    def compute(self, value: ComputeConfig):
        """Set global compute configuration."""
        self._global_compute = value

    @property
    def debug(self) -> DebugConfig:
        """Get debug configuration."""
        if getattr(self._local, "debug", None) is not None:
            return self._local.debug
        return self._global_debug

    @debug.setter
    def debug(self, value: DebugConfig):
        """Set global debug configuration."""
        self._global_debug = value

    # -------------------------------------------------------------------------
    # Convenience Properties
    # -------------------------------------------------------------------------

    @property
    def registry(self) -> "BufferRegistry":
        """Buffer registry of the active storage configuration."""
        return self.storage.registry

    # -------------------------------------------------------------------------
    # Context Manager Support
    # -------------------------------------------------------------------------

    def local(self, **kwargs) -> "_LocalConfigContext":
        """
        Create a local configuration context.

        Args:
            **kwargs: Configuration overrides (storage, compute, debug)

        Returns:
            Context manager
        """
        unknown = set(kwargs) - {"storage", "compute", "debug"}
        if unknown:
            raise TypeError(f"Unknown configuration sections: {sorted(unknown)}")
        return _LocalConfigContext(self, **kwargs)

    def _set_local(self, **kwargs) -> Dict[str, Any]:
        """Set thread-local configuration, returning the replaced values."""
        previous = {}
        for key, value in kwargs.items():
            previous[key] = getattr(self._local, key, None)
            if value is not None:
                setattr(self._local, key, value)
        return previous

    def _restore_local(self, previous: Dict[str, Any]):
        """Restore thread-local configuration."""
        for key, value in previous.items():
            setattr(self._local, key, value)

    # -------------------------------------------------------------------------
    # Reset
    # -------------------------------------------------------------------------

    def reset(self):
        """Reset all configurations to defaults."""
        self._global_storage = StorageConfig()
        self._global_compute = ComputeConfig()
        self._global_debug = DebugConfig()
        logger.debug("Configuration reset to defaults")

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return {
            "storage": {
                "buffer": self.storage.buffer,
                "direct": self.storage.direct,
                "zero_padded": self.storage.zero_padded,
                "dtype": self.storage.dtype,
                "registry": self.storage.registry.names(),
            },
            "compute": {
                "hash_diagonal_limit": self.compute.hash_diagonal_limit,
            },
            "debug": {
                "check_allocation": self.debug.check_allocation,
                "check_index": self.debug.check_index,
            },
        }

    def __repr__(self) -> str:
        return f"SigmatConfig({self.to_dict()})"


class _LocalConfigContext:
    """Context manager for local configuration override."""

    def __init__(self, config: SigmatConfig, **kwargs):
        self._config = config
        self._kwargs = kwargs
        self._previous: List[Dict[str, Any]] = []

    def __enter__(self):
        self._previous.append(self._config._set_local(**self._kwargs))
        return self._config

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._config._restore_local(self._previous.pop())
        return False


# =============================================================================
# Global Instance
# =============================================================================

# Global configuration instance
config = SigmatConfig()


# =============================================================================
# Convenience Functions
# =============================================================================

def get_config() -> SigmatConfig:
    """Get the global configuration instance."""
    return config


def set_storage(buffer: str = 'float', direct: bool = False,
                zero_padded: bool = False, dtype: str = 'float64'):
    """
    Configure default storage, keeping the current registry.

    Args:
        buffer: Registry name of the default buffer
        direct: Allocate natively
        zero_padded: Default zero padding
        dtype: Element type of float buffers
    """
    config.storage = StorageConfig(
        buffer=buffer,
        direct=direct,
        zero_padded=zero_padded,
        dtype=dtype,
        registry=config.storage.registry,
    )


def set_debug(check_allocation: bool = True, check_index: bool = True):
    """
    Configure fail-fast buffer checks.

    Args:
        check_allocation: Reject use before/after allocate()
        check_index: Reject out-of-range linear indices
    """
    config.debug = DebugConfig(
        check_allocation=check_allocation,
        check_index=check_index,
    )


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Config classes
    "StorageConfig",
    "ComputeConfig",
    "DebugConfig",
    # Main config class
    "SigmatConfig",
    # Global instance
    "config",
    # Convenience functions
    "get_config",
    "set_storage",
    "set_debug",
]
