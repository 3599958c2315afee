"""Utility functions for resource quantities and Kubernetes model conversion."""

import json
import re
from functools import lru_cache
from typing import Any, Dict, Optional

from kubernetes import client
from kubernetes.utils import parse_quantity

from .config import (
    DEFAULT_CPU_LIMIT,
    DEFAULT_CPU_REQUEST,
    DEFAULT_MEMORY_LIMIT,
    DEFAULT_MEMORY_REQUEST,
)
from .spec import ResourcesSpec

# Literal the CRD uses for "defer to the default"
UNSET_QUANTITY = "0"

# Canonical quantity form accepted by the API server
QUANTITY_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+|[numkMGTPE]|[KMGTPE]i)?")


@lru_cache(maxsize=None)
def _api_client() -> client.ApiClient:
    return client.ApiClient()


def is_valid_quantity(value: Optional[str]) -> bool:
    """Check if a string parses as a Kubernetes resource quantity."""
    if not value or not QUANTITY_PATTERN.fullmatch(value):
        return False
    try:
        return parse_quantity(value).is_finite()
    except (ValueError, TypeError):
        return False


def resolve_quantity(value: Optional[str], default: str) -> str:
    """
    Resolve a user-supplied quantity against its default.

    Examples:
        (None, "1") -> "1"
        ("0", "1") -> "1"
        ("lots", "1") -> "1"
        ("250m", "1") -> "250m"
    """
    if value == UNSET_QUANTITY or not is_valid_quantity(value):
        return default
    return value


def resolve_resources(resources: Optional[ResourcesSpec]) -> client.V1ResourceRequirements:
    """
    Build container resource requirements, defaulting every missing value.

    Each of the four quantities resolves on its own.
    """
    if resources is None:
        resources = ResourcesSpec()

    limits = {
        "cpu": resolve_quantity(resources.cpu.limit, DEFAULT_CPU_LIMIT),
        "memory": resolve_quantity(resources.memory.limit, DEFAULT_MEMORY_LIMIT),
    }
    requests = {
        "cpu": resolve_quantity(resources.cpu.request, DEFAULT_CPU_REQUEST),
        "memory": resolve_quantity(resources.memory.request, DEFAULT_MEMORY_REQUEST),
    }
    return client.V1ResourceRequirements(limits=limits, requests=requests)


def parse_cpu(cpu_string: str) -> float:
    """
    Parse CPU string to cores (float).

    Examples:
        "100m" -> 0.1
        "1" -> 1.0
        "2500m" -> 2.5
    """
    if not cpu_string:
        return 0.0
    return float(parse_quantity(str(cpu_string).strip()))


def parse_memory(memory_string: str) -> int:
    """
    Parse memory string to bytes.

    Examples:
        "128Mi" -> 134217728
        "1Gi" -> 1073741824
        "512M" -> 512000000
    """
    if not memory_string:
        return 0
    return int(parse_quantity(str(memory_string).strip()))


class _JsonPayload:
    # ApiClient.deserialize reads the body from a response's .data
    def __init__(self, obj: Any):
        self.data = json.dumps(obj)


def to_model(obj: Dict[str, Any], klass: str) -> Any:
    """Convert a camelCase manifest dict into a client model, e.g. "V1Volume"."""
    return _api_client().deserialize(_JsonPayload(obj), klass)


def to_manifest(model: Any) -> Any:
    """Serialize a client model into a camelCase manifest, dropping unset fields."""
    return _api_client().sanitize_for_serialization(model)
