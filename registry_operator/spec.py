"""Parsed model of the ApicurioRegistry custom resource."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Keys of a volume entry that describe the mount rather than the source
_MOUNT_KEYS = ("name", "readOnly", "mountPath", "subPath", "subPathExpr", "mountPropagation")


@dataclass(frozen=True)
class VolumeSpec:
    """Extra volume declared under spec.deployment.volumes."""
    name: str
    mount_path: str
    read_only: bool = False
    sub_path: Optional[str] = None
    sub_path_expr: Optional[str] = None
    mount_propagation: Optional[str] = None
    source: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_crd(cls, entry: Dict[str, Any]) -> "VolumeSpec":
        """Create VolumeSpec from one entry of the CRD volume list."""
        return cls(
            name=entry.get("name", ""),
            mount_path=entry.get("mountPath", ""),
            read_only=_as_bool(entry.get("readOnly")),
            sub_path=entry.get("subPath") or None,
            sub_path_expr=entry.get("subPathExpr") or None,
            mount_propagation=entry.get("mountPropagation") or None,
            source={k: v for k, v in entry.items() if k not in _MOUNT_KEYS},
        )


@dataclass(frozen=True)
class ResourceAmount:
    """Limit and request for one resource, as quantity strings."""
    limit: Optional[str] = None
    request: Optional[str] = None

    @classmethod
    def from_crd(cls, data: Optional[Dict[str, Any]]) -> "ResourceAmount":
        data = data or {}
        return cls(limit=_as_str(data.get("limit")), request=_as_str(data.get("request")))


@dataclass(frozen=True)
class ResourcesSpec:
    """CPU and memory sizing for the registry container."""
    cpu: ResourceAmount = field(default_factory=ResourceAmount)
    memory: ResourceAmount = field(default_factory=ResourceAmount)


@dataclass(frozen=True)
class RegistrySpec:
    """Parsed registry specification."""
    name: str
    namespace: str
    volumes: List[VolumeSpec] = field(default_factory=list)
    resources: ResourcesSpec = field(default_factory=ResourcesSpec)

    @classmethod
    def from_crd(cls, crd_object: Dict[str, Any]) -> "RegistrySpec":
        """Create RegistrySpec from CRD object."""
        metadata = crd_object.get("metadata") or {}
        spec = crd_object.get("spec") or {}
        deployment = spec.get("deployment") or {}
        resources = deployment.get("resources") or {}

        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", "default"),
            volumes=[VolumeSpec.from_crd(v) for v in deployment.get("volumes") or []],
            resources=ResourcesSpec(
                cpu=ResourceAmount.from_crd(resources.get("cpu")),
                memory=ResourceAmount.from_crd(resources.get("memory")),
            ),
        )


def _as_str(value: Any) -> Optional[str]:
    # YAML turns `limit: 1` into an int
    if value is None:
        return None
    return str(value)


def _as_bool(value: Any) -> bool:
    # a quoted "false" must not become True
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return value is True
