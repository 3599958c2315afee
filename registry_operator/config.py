"""Configuration settings for the Apicurio Registry resource factory."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .exceptions import ConfigurationError

# Environment variables read once at startup
ENV_REGISTRY_VERSION = "REGISTRY_VERSION"
ENV_OPERATOR_NAME = "OPERATOR_NAME"

# Label values
REGISTRY_TYPE = "apicurio-registry"

# Object name suffixes
TYPE_TAG_DEPLOYMENT = "deployment"
TYPE_TAG_SERVICE = "service"
TYPE_TAG_INGRESS = "ingress"
TYPE_TAG_PDB = "pdb"

# Container settings
CONTAINER_PORT = 8080
LIVENESS_PATH = "/health/live"
READINESS_PATH = "/health/ready"
TERMINATION_MESSAGE_PATH = "/dev/termination-log"
TERMINATION_GRACE_PERIOD_SECONDS = 30
REPLICAS = 1

# Probe timing, shared by liveness and readiness
PROBE_INITIAL_DELAY_SECONDS = 15
PROBE_TIMEOUT_SECONDS = 5
PROBE_PERIOD_SECONDS = 10
PROBE_SUCCESS_THRESHOLD = 1
PROBE_FAILURE_THRESHOLD = 3

# Rollout and disruption settings
ROLLING_MAX_UNAVAILABLE = 1
ROLLING_MAX_SURGE = 1
PDB_MAX_UNAVAILABLE = 1

# Default resources if not specified (or "0") in the registry spec
DEFAULT_CPU_LIMIT = "1"
DEFAULT_CPU_REQUEST = "500m"
DEFAULT_MEMORY_LIMIT = "1280Mi"
DEFAULT_MEMORY_REQUEST = "512Mi"

# TLS is terminated upstream, so the ingress must not force redirects
INGRESS_ANNOTATIONS = {
    "nginx.ingress.kubernetes.io/force-ssl-redirect": "false",
    "nginx.ingress.kubernetes.io/rewrite-target": "/",
    "nginx.ingress.kubernetes.io/ssl-redirect": "false",
}


@dataclass(frozen=True)
class OperatorConfig:
    """Process-wide identity values stamped onto every generated label set."""
    registry_version: str
    operator_name: str

    def __post_init__(self):
        if not self.registry_version:
            raise ConfigurationError(
                f"Could not determine registry version. "
                f"Environment variable '{ENV_REGISTRY_VERSION}' is empty."
            )
        if not self.operator_name:
            raise ConfigurationError(
                f"Could not determine operator name. "
                f"Environment variable '{ENV_OPERATOR_NAME}' is empty."
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "OperatorConfig":
        """
        Build the config from the process environment.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Raises:
            ConfigurationError: If either variable is missing or empty
        """
        if environ is None:
            environ = os.environ
        return cls(
            registry_version=environ.get(ENV_REGISTRY_VERSION, ""),
            operator_name=environ.get(ENV_OPERATOR_NAME, ""),
        )
