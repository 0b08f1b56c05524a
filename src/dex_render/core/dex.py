"""Dex component renderer.

This module provides the DexComponent class which turns an installation
spec and an identity provider into the complete set of objects that run
Dex in the cluster.
"""

import copy
from typing import Any

from icecream import ic
from kubernetes import client

from dex_render.constants import (
    DEFAULT_OPERATOR_NAMESPACE,
    DEX_CONFIG_KEY,
    DEX_CONFIG_MOUNT_PATH,
    DEX_NAMESPACE,
    DEX_OBJECT_NAME,
    DEX_PORT,
    DEX_TLS_VOLUME_NAME,
)
from dex_render.core.config_document import build_config_document, serialize_config_document
from dex_render.core.csr import create_csr_init_container, csr_cluster_role_binding
from dex_render.core.podspec import base_security_context, tolerate_master
from dex_render.dns import DEFAULT_CLUSTER_DOMAIN, service_dns_names
from dex_render.exceptions import ImageNotFoundError, ImageResolutionError
from dex_render.identity import IdentityProviderConfig
from dex_render.images import COMPONENT_DEX, get_reference, resolve_csr_init_image
from dex_render.models import ImageSet, InstallationSpec, OSType, RenderResult
from dex_render.secrets import copy_to_namespace, reference_list, to_objects
from dex_render.secrets.creation import TLS_CERT_KEY, TLS_PRIVATE_KEY_KEY

DEFAULT_REPLICAS = 1

_DEX_BINARY = "/usr/local/bin/dex"
_PROBE_PATH = "/dex/.well-known/openid-configuration"
_LABELS = {"k8s-app": DEX_OBJECT_NAME}


class DexComponent:
    """Renders the Dex identity broker.

    The renderer is configured once; ``resolve_images`` fills in the
    image references and ``objects`` may then be called any number of
    times, always returning equal output.

    Attributes:
        installation: Installation spec with image and scheduling policy.
        dex_config: Identity provider supplying connector, secrets and mounts.
        pull_secrets: Image pull secrets copied into the Dex namespace.
        cluster_domain: Cluster DNS domain used for certificate DNS names.
        operator_namespace: Namespace the operator runs in.
        replicas: Number of Dex pods.
        image: Resolved Dex image; empty until images are resolved.
        csr_init_image: Resolved CSR init image; empty unless certificate
            management is enabled and images are resolved.

    """

    def __init__(
        self,
        installation: InstallationSpec,
        dex_config: IdentityProviderConfig,
        *,
        pull_secrets: list[client.V1Secret] | None = None,
        cluster_domain: str = DEFAULT_CLUSTER_DOMAIN,
        operator_namespace: str = DEFAULT_OPERATOR_NAMESPACE,
        replicas: int = DEFAULT_REPLICAS,
    ) -> None:
        """Initialize the renderer.

        Args:
            installation: Installation spec with image and scheduling policy.
            dex_config: Identity provider collaborator.
            pull_secrets: Image pull secrets; must be passed as a keyword argument.
            cluster_domain: Cluster DNS domain.
            operator_namespace: Namespace the operator runs in.
            replicas: Number of Dex pods.

        """
        self.installation: InstallationSpec = installation
        self.dex_config: IdentityProviderConfig = dex_config
        self.pull_secrets: list[client.V1Secret] = list(pull_secrets or [])
        self.cluster_domain: str = cluster_domain
        self.operator_namespace: str = operator_namespace
        self.replicas: int = replicas
        self.connector = dex_config.connector()
        self.image: str = ""
        self.csr_init_image: str = ""

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        return (
            f"DexComponent(image={self.image!r}, "
            f"certificate_management={self.installation.certificate_management is not None!r})"
        )

    def resolve_images(self, image_set: ImageSet | None) -> None:
        """Resolve the Dex image and, if needed, the CSR init image.

        Both lookups always run so that every failure is reported together.

        Args:
            image_set: Optional pin set.

        Raises:
            ImageResolutionError: If any lookup fails.

        """
        errors: list[ImageNotFoundError] = []

        try:
            self.image = get_reference(
                COMPONENT_DEX,
                self.installation.registry,
                self.installation.image_path,
                image_set,
            )
        except ImageNotFoundError as err:
            errors.append(err)

        if self.installation.certificate_management is not None:
            try:
                self.csr_init_image = resolve_csr_init_image(self.installation, image_set)
            except ImageNotFoundError as err:
                errors.append(err)

        ic(self.image, self.csr_init_image)

        if errors:
            raise ImageResolutionError(errors)

    @staticmethod
    def supported_os_type() -> OSType:
        """Dex only runs on Linux nodes."""
        return OSType.LINUX

    def objects(self) -> RenderResult:
        """Render every object Dex needs.

        Returns:
            A RenderResult whose ``to_delete`` is always empty.

        """
        objs: list[Any] = [
            self._service_account(),
            self._deployment(),
            self._service(),
            self._cluster_role(),
            self._cluster_role_binding(),
            self._config_map(),
        ]
        objs.extend(to_objects(*self.dex_config.required_secrets(self.operator_namespace)))
        cert_secret = self.dex_config.create_cert_secret()
        if cert_secret is not None:
            objs.append(cert_secret)
        objs.extend(to_objects(*self.dex_config.required_secrets(DEX_NAMESPACE)))
        objs.extend(to_objects(*copy_to_namespace(DEX_NAMESPACE, *self.pull_secrets)))

        if self.installation.certificate_management is not None:
            objs.append(csr_cluster_role_binding(DEX_OBJECT_NAME, DEX_NAMESPACE))

        ic([obj.kind for obj in objs])
        return RenderResult(to_create=objs, to_delete=[])

    def ready(self) -> bool:
        """Dex has no external prerequisites."""
        return True

    def _service_account(self) -> client.V1ServiceAccount:
        return client.V1ServiceAccount(
            api_version="v1",
            kind="ServiceAccount",
            metadata=client.V1ObjectMeta(name=DEX_OBJECT_NAME, namespace=DEX_NAMESPACE),
        )

    def _cluster_role(self) -> client.V1ClusterRole:
        return client.V1ClusterRole(
            api_version="rbac.authorization.k8s.io/v1",
            kind="ClusterRole",
            metadata=client.V1ObjectMeta(name=DEX_OBJECT_NAME),
            rules=[
                client.V1PolicyRule(api_groups=["dex.coreos.com"], resources=["*"], verbs=["*"]),
                client.V1PolicyRule(
                    api_groups=["apiextensions.k8s.io"],
                    resources=["customresourcedefinitions"],
                    verbs=["create"],
                ),
            ],
        )

    def _cluster_role_binding(self) -> client.V1ClusterRoleBinding:
        return client.V1ClusterRoleBinding(
            api_version="rbac.authorization.k8s.io/v1",
            kind="ClusterRoleBinding",
            metadata=client.V1ObjectMeta(name=DEX_OBJECT_NAME),
            role_ref=client.V1RoleRef(
                api_group="rbac.authorization.k8s.io",
                kind="ClusterRole",
                name=DEX_OBJECT_NAME,
            ),
            subjects=[client.RbacV1Subject(kind="ServiceAccount", name=DEX_OBJECT_NAME, namespace=DEX_NAMESPACE)],
        )

    def _init_containers(self) -> list[client.V1Container] | None:
        certificate_management = self.installation.certificate_management
        if certificate_management is None:
            return None
        return [
            create_csr_init_container(
                certificate_management,
                self.csr_init_image,
                DEX_TLS_VOLUME_NAME,
                DEX_OBJECT_NAME,
                TLS_PRIVATE_KEY_KEY,
                TLS_CERT_KEY,
                service_dns_names(DEX_OBJECT_NAME, DEX_NAMESPACE, self.cluster_domain),
                DEX_NAMESPACE,
            )
        ]

    def _deployment(self) -> client.V1Deployment:
        # Dex cannot run two configuration generations side by side, so old
        # pods are torn down before new ones start.
        strategy = client.V1DeploymentStrategy(type="Recreate")
        tolerations = [*copy.deepcopy(self.installation.control_plane_tolerations), tolerate_master()]
        container = client.V1Container(
            name=DEX_OBJECT_NAME,
            image=self.image,
            env=self.dex_config.required_env(""),
            liveness_probe=self._probe(),
            security_context=base_security_context(),
            command=[_DEX_BINARY, "serve", f"{DEX_CONFIG_MOUNT_PATH}/{DEX_CONFIG_KEY}"],
            ports=[client.V1ContainerPort(name="https", container_port=DEX_PORT)],
            volume_mounts=self.dex_config.required_volume_mounts(),
        )
        return client.V1Deployment(
            api_version="apps/v1",
            kind="Deployment",
            metadata=client.V1ObjectMeta(name=DEX_OBJECT_NAME, namespace=DEX_NAMESPACE, labels=dict(_LABELS)),
            spec=client.V1DeploymentSpec(
                selector=client.V1LabelSelector(match_labels=dict(_LABELS)),
                replicas=self.replicas,
                strategy=strategy,
                template=client.V1PodTemplateSpec(
                    metadata=client.V1ObjectMeta(
                        name=DEX_OBJECT_NAME,
                        namespace=DEX_NAMESPACE,
                        labels=dict(_LABELS),
                        annotations=self.dex_config.required_annotations(),
                    ),
                    spec=client.V1PodSpec(
                        node_selector=copy.deepcopy(self.installation.control_plane_node_selector),
                        service_account_name=DEX_OBJECT_NAME,
                        tolerations=tolerations,
                        image_pull_secrets=reference_list(self.pull_secrets),
                        init_containers=self._init_containers(),
                        containers=[container],
                        volumes=self.dex_config.required_volumes(),
                    ),
                ),
            ),
        )

    def _service(self) -> client.V1Service:
        return client.V1Service(
            api_version="v1",
            kind="Service",
            metadata=client.V1ObjectMeta(name=DEX_OBJECT_NAME, namespace=DEX_NAMESPACE),
            spec=client.V1ServiceSpec(
                selector=dict(_LABELS),
                ports=[
                    client.V1ServicePort(
                        name=DEX_OBJECT_NAME,
                        port=DEX_PORT,
                        target_port=DEX_PORT,
                        protocol="TCP",
                    )
                ],
            ),
        )

    def _probe(self) -> client.V1Probe:
        """Perform an HTTPS GET against the discovery endpoint."""
        return client.V1Probe(
            http_get=client.V1HTTPGetAction(path=_PROBE_PATH, port=DEX_PORT, scheme="HTTPS"),
            initial_delay_seconds=90,
            period_seconds=10,
        )

    def _config_map(self) -> client.V1ConfigMap:
        document = build_config_document(self.dex_config.manager_uri(), self.connector)
        return client.V1ConfigMap(
            api_version="v1",
            kind="ConfigMap",
            metadata=client.V1ObjectMeta(name=DEX_OBJECT_NAME, namespace=DEX_NAMESPACE),
            data={DEX_CONFIG_KEY: serialize_config_document(document)},
        )
