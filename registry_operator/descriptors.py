"""Uniform wrapper around every object the factory produces."""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from kubernetes import client

from .status import RegistryStatus
from .utils import to_manifest


class DescriptorKind(str, Enum):
    DEPLOYMENT = "Deployment"
    SERVICE = "Service"
    INGRESS = "Ingress"
    POD_DISRUPTION_BUDGET = "PodDisruptionBudget"
    STATUS = "Status"


Body = Union[
    client.V1Deployment,
    client.V1Service,
    client.V1Ingress,
    client.V1PodDisruptionBudget,
    RegistryStatus,
]

_BODY_TYPES = {
    DescriptorKind.DEPLOYMENT: client.V1Deployment,
    DescriptorKind.SERVICE: client.V1Service,
    DescriptorKind.INGRESS: client.V1Ingress,
    DescriptorKind.POD_DISRUPTION_BUDGET: client.V1PodDisruptionBudget,
    DescriptorKind.STATUS: RegistryStatus,
}


@dataclass(frozen=True)
class Descriptor:
    """
    One piece of desired state.

    Two descriptors built from the same inputs compare and hash equal, which
    lets the apply loop skip unchanged objects.
    """
    kind: DescriptorKind
    body: Body

    def __post_init__(self):
        expected = _BODY_TYPES[self.kind]
        if not isinstance(self.body, expected):
            raise TypeError(
                f"{self.kind.value} descriptor needs a {expected.__name__}, "
                f"got {type(self.body).__name__}"
            )

    def __hash__(self) -> int:
        # client models are mutable and unhashable, so hash the rendered manifest
        return hash((self.kind, json.dumps(self.to_dict(), sort_keys=True)))

    @property
    def name(self) -> Optional[str]:
        metadata = getattr(self.body, "metadata", None)
        return metadata.name if metadata else None

    @property
    def namespace(self) -> Optional[str]:
        metadata = getattr(self.body, "metadata", None)
        return metadata.namespace if metadata else None

    def to_dict(self) -> Dict[str, Any]:
        """Render the body as a manifest dict with camelCase keys."""
        if isinstance(self.body, RegistryStatus):
            return self.body.to_dict()
        return to_manifest(self.body)
