"""Builds the desired Kubernetes objects for an Apicurio Registry."""

import logging
from typing import Dict, List, Optional

from kubernetes import client

from .config import (
    CONTAINER_PORT,
    INGRESS_ANNOTATIONS,
    LIVENESS_PATH,
    PDB_MAX_UNAVAILABLE,
    PROBE_FAILURE_THRESHOLD,
    PROBE_INITIAL_DELAY_SECONDS,
    PROBE_PERIOD_SECONDS,
    PROBE_SUCCESS_THRESHOLD,
    PROBE_TIMEOUT_SECONDS,
    READINESS_PATH,
    REGISTRY_TYPE,
    REPLICAS,
    ROLLING_MAX_SURGE,
    ROLLING_MAX_UNAVAILABLE,
    TERMINATION_GRACE_PERIOD_SECONDS,
    TERMINATION_MESSAGE_PATH,
    TYPE_TAG_DEPLOYMENT,
    TYPE_TAG_INGRESS,
    TYPE_TAG_PDB,
    TYPE_TAG_SERVICE,
    OperatorConfig,
)
from .context import (
    CFG_STA_DEPLOYMENT_NAME,
    CFG_STA_IMAGE,
    CFG_STA_INGRESS_NAME,
    CFG_STA_REPLICA_COUNT,
    CFG_STA_ROUTE,
    CFG_STA_SERVICE_NAME,
    LoopContext,
)
from .descriptors import Descriptor, DescriptorKind
from .spec import RegistrySpec, VolumeSpec
from .status import RegistryStatus
from .utils import resolve_resources, to_model

logger = logging.getLogger(__name__)


class KubeFactory:
    """Creates Deployment, Service, Ingress and PDB objects for one registry."""

    def __init__(self, ctx: LoopContext, config: Optional[OperatorConfig] = None):
        """
        Initialize the factory.

        Args:
            ctx: Loop context of the managed registry
            config: Operator identity; read from the environment when omitted

        Raises:
            ConfigurationError: If the registry version or operator name is empty
        """
        self.ctx = ctx
        self.config = config if config is not None else OperatorConfig.from_env()

    # MUST NOT be used as selector labels, the version ones change on upgrade.
    def get_labels(self) -> Dict[str, str]:
        """Full label set stamped on every object."""
        app = self.ctx.app_name
        version = self.config.registry_version

        return {
            "app": app,

            "apicur.io/type": REGISTRY_TYPE,
            "apicur.io/name": app,
            "apicur.io/version": version,

            "app.kubernetes.io/name": REGISTRY_TYPE,
            "app.kubernetes.io/instance": app,
            "app.kubernetes.io/version": version,

            "app.kubernetes.io/managed-by": self.config.operator_name,
        }

    # Selector labels MUST stay constant for the life of the registry.
    def get_selector_labels(self) -> Dict[str, str]:
        return {"app": self.ctx.app_name}

    def _create_object_meta(self, type_tag: str) -> client.V1ObjectMeta:
        return client.V1ObjectMeta(
            name=f"{self.ctx.app_name}-{type_tag}",
            namespace=self.ctx.app_namespace,
            labels=self.get_labels(),
        )

    def _create_probe(self, path: str) -> client.V1Probe:
        return client.V1Probe(
            http_get=client.V1HTTPGetAction(path=path, port=CONTAINER_PORT),
            initial_delay_seconds=PROBE_INITIAL_DELAY_SECONDS,
            timeout_seconds=PROBE_TIMEOUT_SECONDS,
            period_seconds=PROBE_PERIOD_SECONDS,
            success_threshold=PROBE_SUCCESS_THRESHOLD,
            failure_threshold=PROBE_FAILURE_THRESHOLD,
        )

    @staticmethod
    def _create_volume(volume: VolumeSpec) -> client.V1Volume:
        return to_model(dict(volume.source, name=volume.name), "V1Volume")

    @staticmethod
    def _create_volume_mount(volume: VolumeSpec) -> client.V1VolumeMount:
        return client.V1VolumeMount(
            name=volume.name,
            read_only=volume.read_only,
            mount_path=volume.mount_path,
            sub_path=volume.sub_path,
            sub_path_expr=volume.sub_path_expr,
            mount_propagation=volume.mount_propagation,
        )

    def create_deployment(self) -> client.V1Deployment:
        """
        Create the registry Deployment.

        The image is left empty; it is filled in once the image to deploy
        has been resolved. Without a cached spec every resource quantity
        takes its default and no extra volumes are mounted.

        Returns:
            New V1Deployment object
        """
        spec = self.ctx.get_spec()
        volumes = spec.volumes if spec else []
        resources = resolve_resources(spec.resources if spec else None)

        metadata = self._create_object_meta(TYPE_TAG_DEPLOYMENT)
        logger.debug(f"Building deployment {metadata.namespace}/{metadata.name} with {len(volumes)} extra volume(s)")

        container = client.V1Container(
            name=self.ctx.app_name,
            image="",
            ports=[client.V1ContainerPort(container_port=CONTAINER_PORT, protocol="TCP")],
            env=[],
            resources=resources,
            liveness_probe=self._create_probe(LIVENESS_PATH),
            readiness_probe=self._create_probe(READINESS_PATH),
            termination_message_path=TERMINATION_MESSAGE_PATH,
            image_pull_policy="Always",
            volume_mounts=[self._create_volume_mount(v) for v in volumes] or None,
        )

        return client.V1Deployment(
            api_version="apps/v1",
            kind="Deployment",
            metadata=metadata,
            spec=client.V1DeploymentSpec(
                replicas=REPLICAS,
                selector=client.V1LabelSelector(match_labels=self.get_selector_labels()),
                template=client.V1PodTemplateSpec(
                    metadata=client.V1ObjectMeta(labels=self.get_labels()),
                    spec=client.V1PodSpec(
                        containers=[container],
                        restart_policy="Always",
                        termination_grace_period_seconds=TERMINATION_GRACE_PERIOD_SECONDS,
                        dns_policy="ClusterFirst",
                        volumes=[self._create_volume(v) for v in volumes] or None,
                    ),
                ),
                strategy=client.V1DeploymentStrategy(
                    type="RollingUpdate",
                    rolling_update=client.V1RollingUpdateDeployment(
                        max_unavailable=ROLLING_MAX_UNAVAILABLE,
                        max_surge=ROLLING_MAX_SURGE,
                    ),
                ),
            ),
        )

    def create_service(self) -> client.V1Service:
        """Create the cluster-internal Service in front of the registry pods."""
        return client.V1Service(
            api_version="v1",
            kind="Service",
            metadata=self._create_object_meta(TYPE_TAG_SERVICE),
            spec=client.V1ServiceSpec(
                ports=[
                    client.V1ServicePort(
                        protocol="TCP",
                        port=CONTAINER_PORT,
                        target_port=CONTAINER_PORT,
                    )
                ],
                selector=self.get_selector_labels(),
                type="ClusterIP",
                session_affinity="None",
            ),
        )

    def create_ingress(self, service_name: str) -> client.V1Ingress:
        """
        Create an Ingress routing every path to the given service.

        Args:
            service_name: Name of the backend Service

        Raises:
            ValueError: If service_name is empty
        """
        if not service_name:
            raise ValueError("service_name is required to create an ingress")

        metadata = self._create_object_meta(TYPE_TAG_INGRESS)
        metadata.annotations = dict(INGRESS_ANNOTATIONS)

        return client.V1Ingress(
            api_version="networking.k8s.io/v1",
            kind="Ingress",
            metadata=metadata,
            spec=client.V1IngressSpec(
                rules=[
                    client.V1IngressRule(
                        http=client.V1HTTPIngressRuleValue(
                            paths=[
                                client.V1HTTPIngressPath(
                                    path="/",
                                    path_type="Prefix",
                                    backend=client.V1IngressBackend(
                                        service=client.V1IngressServiceBackend(
                                            name=service_name,
                                            port=client.V1ServiceBackendPort(number=CONTAINER_PORT),
                                        )
                                    ),
                                )
                            ]
                        )
                    )
                ]
            ),
        )

    def create_pod_disruption_budget(self) -> client.V1PodDisruptionBudget:
        return client.V1PodDisruptionBudget(
            api_version="policy/v1",
            kind="PodDisruptionBudget",
            metadata=self._create_object_meta(TYPE_TAG_PDB),
            spec=client.V1PodDisruptionBudgetSpec(
                selector=client.V1LabelSelector(match_labels=self.get_selector_labels()),
                max_unavailable=PDB_MAX_UNAVAILABLE,
            ),
        )

    def create_status(self, spec: Optional[RegistrySpec] = None) -> RegistryStatus:
        """
        Reassemble the registry status from values already in the status store.

        Args:
            spec: The registry the status belongs to (defaults to the cached spec)
        """
        if spec is None:
            spec = self.ctx.get_spec()
        logger.debug(f"Projecting status for {spec.name if spec else self.ctx.app_name}")

        status = self.ctx.status
        return RegistryStatus(
            image=status.get_config(CFG_STA_IMAGE),
            deployment_name=status.get_config(CFG_STA_DEPLOYMENT_NAME),
            service_name=status.get_config(CFG_STA_SERVICE_NAME),
            ingress_name=status.get_config(CFG_STA_INGRESS_NAME),
            replica_count=status.get_config_int32(CFG_STA_REPLICA_COUNT),
            host=status.get_config(CFG_STA_ROUTE),
        )

    def create_all(self, service_name: Optional[str] = None) -> List[Descriptor]:
        """
        Create every descriptor for the registry, in apply order.

        Args:
            service_name: Ingress backend (defaults to the generated service)

        Returns:
            Deployment, Service, Ingress, PDB and Status descriptors
        """
        service = self.create_service()
        if service_name is None:
            service_name = service.metadata.name

        return [
            Descriptor(DescriptorKind.DEPLOYMENT, self.create_deployment()),
            Descriptor(DescriptorKind.SERVICE, service),
            Descriptor(DescriptorKind.INGRESS, self.create_ingress(service_name)),
            Descriptor(DescriptorKind.POD_DISRUPTION_BUDGET, self.create_pod_disruption_budget()),
            Descriptor(DescriptorKind.STATUS, self.create_status()),
        ]
