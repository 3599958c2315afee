"""Status summary reported back on the ApicurioRegistry resource."""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class RegistryStatus:
    """Status payload of an ApicurioRegistry."""
    image: str = ""
    deployment_name: str = ""
    service_name: str = ""
    ingress_name: str = ""
    replica_count: int = 0
    host: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the CRD's camelCase field names."""
        return {
            "image": self.image,
            "deploymentName": self.deployment_name,
            "serviceName": self.service_name,
            "ingressName": self.ingress_name,
            "replicaCount": self.replica_count,
            "host": self.host,
        }
