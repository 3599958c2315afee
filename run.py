#!/usr/bin/env python3
"""
Apicurio Registry Resource Factory - Entry Point

Renders the Kubernetes objects the operator would apply for an
ApicurioRegistry custom resource, as a multi-document YAML stream.

Usage:
    REGISTRY_VERSION=2.0.0 OPERATOR_NAME=apicurio-registry-operator \\
        python run.py --file registry.yaml [--namespace NAMESPACE]
"""

import argparse
import logging
import sys

import yaml

from registry_operator.config import OperatorConfig
from registry_operator.context import LoopContext
from registry_operator.exceptions import ConfigurationError
from registry_operator.factory import KubeFactory
from registry_operator.utils import parse_cpu, parse_memory

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stderr,
    )


def load_registry(path: str) -> dict:
    """Load an ApicurioRegistry resource from a YAML or JSON file."""
    with open(path, encoding="utf-8") as f:
        obj = yaml.safe_load(f)
    if not isinstance(obj, dict):
        raise ValueError(f"{path} does not contain a resource object")
    return obj


def main(argv=None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Render the Kubernetes objects for an ApicurioRegistry resource"
    )
    parser.add_argument(
        "--file", "-f",
        required=True,
        help="Path to the ApicurioRegistry resource (YAML or JSON)"
    )
    parser.add_argument(
        "--namespace", "-n",
        default="",
        help="Namespace override (default: from the resource metadata)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose/debug logging"
    )

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = OperatorConfig.from_env()
    except ConfigurationError as e:
        logger.error(f"Invalid operator configuration: {e}")
        return 1

    try:
        registry = load_registry(args.file)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Failed to load {args.file}: {e}")
        return 1

    ctx = LoopContext.from_crd(registry, namespace=args.namespace)
    factory = KubeFactory(ctx, config)
    descriptors = factory.create_all()

    resources = descriptors[0].body.spec.template.spec.containers[0].resources
    logger.info(
        f"Registry {ctx.app_namespace}/{ctx.app_name}: "
        f"CPU {parse_cpu(resources.requests['cpu'])}-{parse_cpu(resources.limits['cpu'])} cores, "
        f"memory {parse_memory(resources.requests['memory'])}-{parse_memory(resources.limits['memory'])} bytes"
    )

    yaml.safe_dump_all(
        [d.to_dict() for d in descriptors],
        sys.stdout,
        default_flow_style=False,
        sort_keys=False,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
