"""Shared fixtures for the registry factory tests."""

from __future__ import annotations

import pytest

from registry_operator.config import OperatorConfig
from registry_operator.context import LoopContext
from registry_operator.factory import KubeFactory


def registry_crd(
    name: str = "reg1",
    namespace: str = "ns1",
    resources: dict | None = None,
    volumes: list | None = None,
) -> dict:
    """Return a minimal ApicurioRegistry object as the API server would."""
    deployment: dict = {}
    if resources is not None:
        deployment["resources"] = resources
    if volumes is not None:
        deployment["volumes"] = volumes
    return {
        "apiVersion": "registry.apicur.io/v1",
        "kind": "ApicurioRegistry",
        "metadata": {"name": name, "namespace": namespace},
        "spec": {"deployment": deployment},
    }


@pytest.fixture
def operator_config() -> OperatorConfig:
    return OperatorConfig(registry_version="2.0.0", operator_name="op1")


@pytest.fixture
def empty_context() -> LoopContext:
    """Context whose resource cache holds no spec."""
    return LoopContext(app_name="reg1", app_namespace="ns1")


@pytest.fixture
def factory(empty_context: LoopContext, operator_config: OperatorConfig) -> KubeFactory:
    return KubeFactory(empty_context, operator_config)
