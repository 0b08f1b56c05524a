"""Certificate signing request (CSR) helpers.

When certificate management is enabled, components do not mount a
pre-existing key pair. Instead an init container generates a key, submits
a CSR to the configured signer and writes the issued certificate into a
shared volume before the main container starts.
"""

from kubernetes import client

from dex_render.core.podspec import base_security_context
from dex_render.models import CertificateManagement

CSR_INIT_CONTAINER_NAME = "key-cert-provisioner"
CSR_MOUNT_PATH = "/certs-share"
CSR_CLUSTER_ROLE_NAME = "tigera-csr-creator"


def _field_env(name: str, field_path: str) -> client.V1EnvVar:
    return client.V1EnvVar(
        name=name,
        value_from=client.V1EnvVarSource(field_ref=client.V1ObjectFieldSelector(field_path=field_path)),
    )


def create_csr_init_container(
    certificate_management: CertificateManagement,
    image: str,
    mount_name: str,
    common_name: str,
    key_name: str,
    cert_name: str,
    dns_names: list[str],
    app_name: str,
) -> client.V1Container:
    """Build the init container that provisions a key pair through a CSR.

    Args:
        certificate_management: Signer and algorithm settings.
        image: The resolved key-cert-provisioner image.
        mount_name: Volume the key and certificate are written to.
        common_name: Common name of the requested certificate.
        key_name: File name of the private key inside the volume.
        cert_name: File name of the certificate inside the volume.
        dns_names: Subject alternative names of the certificate.
        app_name: Application label attached to the CSR.

    Returns:
        The init container definition.

    """
    return client.V1Container(
        name=CSR_INIT_CONTAINER_NAME,
        image=image,
        volume_mounts=[client.V1VolumeMount(name=mount_name, mount_path=CSR_MOUNT_PATH, read_only=False)],
        env=[
            client.V1EnvVar(name="CERTIFICATE_PATH", value=f"{CSR_MOUNT_PATH}/"),
            client.V1EnvVar(name="SIGNER", value=certificate_management.signer_name),
            client.V1EnvVar(name="COMMON_NAME", value=common_name),
            client.V1EnvVar(name="KEY_ALGORITHM", value=certificate_management.key_algorithm),
            client.V1EnvVar(name="SIGNATURE_ALGORITHM", value=certificate_management.signature_algorithm),
            client.V1EnvVar(name="KEY_NAME", value=key_name),
            client.V1EnvVar(name="CERT_NAME", value=cert_name),
            client.V1EnvVar(name="CA_CERT", value=certificate_management.ca_cert.decode()),
            client.V1EnvVar(name="APP_NAME", value=app_name),
            client.V1EnvVar(name="DNS_NAMES", value=",".join(dns_names)),
            _field_env("POD_IP", "status.podIP"),
            _field_env("POD_NAME", "metadata.name"),
            _field_env("POD_NAMESPACE", "metadata.namespace"),
        ],
        security_context=base_security_context(),
    )


def csr_cluster_role_binding(name: str, namespace: str) -> client.V1ClusterRoleBinding:
    """Bind a component's service account to the CSR creator role.

    Args:
        name: Name of the component and of its service account.
        namespace: Namespace of the service account.

    Returns:
        A ClusterRoleBinding named ``<name>:csr-creator``.

    """
    return client.V1ClusterRoleBinding(
        api_version="rbac.authorization.k8s.io/v1",
        kind="ClusterRoleBinding",
        metadata=client.V1ObjectMeta(name=f"{name}:csr-creator", labels={}),
        role_ref=client.V1RoleRef(
            api_group="rbac.authorization.k8s.io",
            kind="ClusterRole",
            name=CSR_CLUSTER_ROLE_NAME,
        ),
        subjects=[client.RbacV1Subject(kind="ServiceAccount", name=name, namespace=namespace)],
    )
