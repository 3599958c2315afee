"""Per-target loop context: resource cache and status store."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

from .spec import RegistrySpec

logger = logging.getLogger(__name__)

# Resource cache keys
RC_KEY_SPEC = "spec"

# Status store keys
CFG_STA_IMAGE = "CFG_STA_IMAGE"
CFG_STA_DEPLOYMENT_NAME = "CFG_STA_DEPLOYMENT_NAME"
CFG_STA_SERVICE_NAME = "CFG_STA_SERVICE_NAME"
CFG_STA_INGRESS_NAME = "CFG_STA_INGRESS_NAME"
CFG_STA_REPLICA_COUNT = "CFG_STA_REPLICA_COUNT"
CFG_STA_ROUTE = "CFG_STA_ROUTE"

_INT32_MIN = -(2 ** 31)
_INT32_MAX = 2 ** 31 - 1


class ResourceCache:
    """
    Keyed cache of the objects a reconciliation works from.

    At most one entry per key, last writer wins. Not synchronized: the
    owning reconciliation attempt serializes access.
    """

    def __init__(self):
        """Initialize the cache."""
        self._entries: Dict[str, Any] = {}

    def set(self, key: str, value: Any) -> None:
        """Store a value, replacing any previous entry for the key."""
        self._entries[key] = value
        logger.debug(f"Cached resource: {key}")

    def get(self, key: str) -> Tuple[Optional[Any], bool]:
        """
        Look up a cache entry.

        Returns:
            Tuple of (value, present)
        """
        if key in self._entries:
            return self._entries[key], True
        return None, False

    def remove(self, key: str) -> Optional[Any]:
        """Remove an entry, returning the old value or None."""
        value = self._entries.pop(key, None)
        if value is not None:
            logger.debug(f"Removed resource from cache: {key}")
        return value

    def clear(self) -> None:
        """Clear all entries from cache."""
        self._entries.clear()


class StatusStore:
    """Operational values recorded by the control loop, read back as status."""

    def __init__(self):
        self._values: Dict[str, Union[str, int]] = {}

    def set_config(self, key: str, value: Union[str, int]) -> None:
        self._values[key] = value

    def get_config(self, key: str) -> str:
        """Return the string value for key, or "" when absent."""
        value = self._values.get(key)
        if value is None:
            return ""
        return str(value)

    def get_config_int32(self, key: str) -> int:
        """
        Return the int32 value for key, or 0 when absent.

        Raises:
            ValueError: If the stored value is not an integer in int32 range
        """
        value = self._values.get(key)
        if value is None:
            return 0
        number = int(value)
        if not _INT32_MIN <= number <= _INT32_MAX:
            raise ValueError(f"Status value {key}={number} does not fit in int32")
        return number


@dataclass
class LoopContext:
    """Everything the factory needs to know about one managed registry."""
    app_name: str
    app_namespace: str
    resource_cache: ResourceCache = field(default_factory=ResourceCache)
    status: StatusStore = field(default_factory=StatusStore)

    @classmethod
    def from_crd(cls, crd_object: Dict[str, Any], namespace: str = "") -> "LoopContext":
        """
        Create a context for a registry custom resource with its spec cached.

        Args:
            crd_object: The CRD object, as a dict
            namespace: Overrides the namespace from the object metadata
        """
        spec = RegistrySpec.from_crd(crd_object)
        ctx = cls(app_name=spec.name, app_namespace=namespace or spec.namespace)
        ctx.resource_cache.set(RC_KEY_SPEC, spec)
        return ctx

    def get_spec(self) -> Optional[RegistrySpec]:
        """Return the cached registry spec, or None on a cache miss."""
        spec, present = self.resource_cache.get(RC_KEY_SPEC)
        if not present:
            return None
        return spec
