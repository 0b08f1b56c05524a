"""Shared test fixtures for dex-render tests."""

import pytest
from kubernetes import client

from dex_render.identity import OIDCIdentityProvider
from dex_render.models import CertificateManagement, ImageSet, InstallationSpec
from dex_render.secrets import create_tls_secret, new_secret


class StubIdentityProvider:
    """Minimal identity provider returning empty sequences."""

    def __init__(self, manager_uri: str = "", connector: dict | None = None) -> None:
        self._manager_uri = manager_uri
        self._connector = connector if connector is not None else {"id": "stub", "type": "mockCallback"}

    def connector(self):
        return self._connector

    def required_secrets(self, namespace):
        return []

    def required_env(self, prefix):
        return []

    def required_volumes(self):
        return []

    def required_volume_mounts(self):
        return []

    def required_annotations(self):
        return {}

    def manager_uri(self):
        return self._manager_uri

    def create_cert_secret(self):
        return None


@pytest.fixture
def stub_provider():
    """Identity provider stub with no secrets, env or volumes."""
    return StubIdentityProvider()


@pytest.fixture
def installation():
    """Installation with certificate management disabled."""
    return InstallationSpec()


@pytest.fixture
def certificate_management():
    """Certificate management settings."""
    return CertificateManagement(
        ca_cert=b"-----BEGIN CERTIFICATE-----\nCA\n-----END CERTIFICATE-----\n",
        signer_name="example.com/signer",
    )


@pytest.fixture
def cert_installation(certificate_management):
    """Installation with certificate management enabled."""
    return InstallationSpec(certificate_management=certificate_management)


@pytest.fixture
def image_set():
    """ImageSet pinning both Dex and the CSR init container."""
    return ImageSet(
        name="enterprise-v3.8",
        images={
            "tigera/dex": "sha256:dex",
            "tigera/key-cert-provisioner": "sha256:kcp",
        },
    )


@pytest.fixture
def empty_image_set():
    """ImageSet pinning nothing."""
    return ImageSet(name="empty")


@pytest.fixture
def pull_secret():
    """Image pull secret living in the operator namespace."""
    secret = new_secret("pull-secret", "tigera-operator", {".dockerconfigjson": b"{}"})
    secret.type = "kubernetes.io/dockerconfigjson"
    secret.metadata.labels = {"owner": "operator"}
    return secret


@pytest.fixture
def oidc_secret():
    """Upstream OIDC client credentials."""
    return new_secret(
        "tigera-oidc-credentials",
        "tigera-operator",
        {"clientID": b"client-id", "clientSecret": b"client-secret"},
    )


@pytest.fixture
def dex_secret():
    """Shared secret of the manager client."""
    return new_secret("tigera-dex", "tigera-operator", {"secret": b"dex-secret"})


@pytest.fixture
def tls_secret():
    """Dex serving key pair."""
    return create_tls_secret("tigera-dex-tls", "tigera-operator", b"KEY", b"CERT")


@pytest.fixture
def oidc_provider(oidc_secret, dex_secret, tls_secret):
    """OIDC identity provider without certificate management."""
    return OIDCIdentityProvider(
        manager_domain="https://mgr.example.com",
        issuer_url="https://accounts.example.com",
        oidc_secret=oidc_secret,
        dex_secret=dex_secret,
        tls_secret=tls_secret,
        groups_claim="groups",
    )


@pytest.fixture
def toleration():
    """Extra control plane toleration."""
    return client.V1Toleration(key="dedicated", operator="Equal", value="control", effect="NoSchedule")


@pytest.fixture
def sample_installation_yaml():
    """Sample Installation resource."""
    return """apiVersion: operator.tigera.io/v1
kind: Installation
metadata:
  name: default
spec:
  registry: registry.example.com
  imagePath: mirror
  controlPlaneNodeSelector:
    role: control
  controlPlaneTolerations:
    - key: dedicated
      operator: Equal
      value: control
      effect: NoSchedule
"""


@pytest.fixture
def sample_image_set_yaml():
    """Sample ImageSet resource."""
    return """apiVersion: operator.tigera.io/v1
kind: ImageSet
metadata:
  name: enterprise-v3.8
spec:
  images:
    - image: tigera/dex
      digest: sha256:dex
"""


@pytest.fixture
def sample_identity_provider_yaml():
    """Sample identity provider settings."""
    return """managerDomain: https://mgr.example.com
oidc:
  issuerURL: https://accounts.example.com
  usernameClaim: email
  groupsClaim: groups
"""


@pytest.fixture
def input_files(tmp_path, sample_installation_yaml, sample_identity_provider_yaml):
    """Write a complete set of CLI input files and return their paths."""
    installation_file = tmp_path / "installation.yaml"
    installation_file.write_text(sample_installation_yaml)

    idp_file = tmp_path / "oidc.yaml"
    idp_file.write_text(sample_identity_provider_yaml)

    secrets = {
        "tigera-oidc-credentials": "stringData:\n  clientID: id\n  clientSecret: secret\n",
        "tigera-dex": "stringData:\n  secret: dex\n",
        "tigera-dex-tls": "type: kubernetes.io/tls\ndata:\n  tls.crt: Q0VSVA==\n  tls.key: S0VZ\n",
    }
    secret_files = []
    for name, body in secrets.items():
        path = tmp_path / f"{name}.yaml"
        path.write_text(
            f"apiVersion: v1\nkind: Secret\nmetadata:\n  name: {name}\n  namespace: tigera-operator\n{body}"
        )
        secret_files.append(str(path))

    return {
        "installation": str(installation_file),
        "identity_provider": str(idp_file),
        "secrets": secret_files,
    }


@pytest.fixture
def make_stub_provider():
    """Factory for identity provider stubs with a chosen manager URI."""
    return StubIdentityProvider
