"""Identity provider configuration.

The Dex renderer does not know how an upstream identity provider is
configured. It consumes an ``IdentityProviderConfig`` that supplies the
connector, the secrets, env, volumes and annotations the Dex pod needs,
and the manager's public URI. ``OIDCIdentityProvider`` is the
implementation for a generic OpenID Connect upstream.
"""

from dataclasses import dataclass
from typing import Any, Protocol

from kubernetes import client

from dex_render.constants import (
    DEFAULT_OPERATOR_NAMESPACE,
    DEX_CERT_SECRET_NAME,
    DEX_CONFIG_KEY,
    DEX_CONFIG_MOUNT_PATH,
    DEX_CONFIG_VOLUME_NAME,
    DEX_OBJECT_NAME,
    DEX_SECRET_ENV,
    DEX_TLS_MOUNT_PATH,
    DEX_TLS_VOLUME_NAME,
)
from dex_render.models import CertificateManagement
from dex_render.secrets import (
    annotation_hash,
    copy_to_namespace,
    create_certificate_secret,
    decode_value,
)
from dex_render.secrets.creation import TLS_CERT_KEY

CLIENT_ID_ENV = "CLIENT_ID"
CLIENT_SECRET_ENV = "CLIENT_SECRET"

# Keys inside the identity provider secrets
CLIENT_ID_SECRET_FIELD = "clientID"
CLIENT_SECRET_SECRET_FIELD = "clientSecret"
DEX_SECRET_FIELD = "secret"

_ANNOTATION_PREFIX = "hash.operator.tigera.io"


class IdentityProviderConfig(Protocol):
    """Protocol for identity provider collaborators of the Dex renderer"""

    def connector(self) -> dict[str, Any]:
        """Return the Dex connector entry for the upstream provider"""
        ...

    def required_secrets(self, namespace: str) -> list[client.V1Secret]:
        """Return the secrets Dex needs, placed in the given namespace"""
        ...

    def required_env(self, prefix: str) -> list[client.V1EnvVar]:
        """Return env vars for the Dex container, names prefixed with prefix"""
        ...

    def required_volumes(self) -> list[client.V1Volume]:
        """Return the volumes of the Dex pod"""
        ...

    def required_volume_mounts(self) -> list[client.V1VolumeMount]:
        """Return the volume mounts of the Dex container"""
        ...

    def required_annotations(self) -> dict[str, str]:
        """Return pod annotations; a change in value restarts Dex"""
        ...

    def manager_uri(self) -> str:
        """Return the public URI of the manager, or an empty string"""
        ...

    def create_cert_secret(self) -> client.V1Secret | None:
        """Return the secret clients mount to trust Dex, if there is one"""
        ...


def _secret_env(name: str, secret_name: str, key: str) -> client.V1EnvVar:
    return client.V1EnvVar(
        name=name,
        value_from=client.V1EnvVarSource(
            secret_key_ref=client.V1SecretKeySelector(name=secret_name, key=key),
        ),
    )


@dataclass(frozen=True)
class OIDCIdentityProvider:
    """Dex configuration for an OpenID Connect upstream.

    Attributes:
        manager_domain: Public URI of the manager (e.g. 'https://mgr.example.com').
        issuer_url: Issuer of the upstream OIDC provider.
        oidc_secret: Secret with the upstream ``clientID`` and ``clientSecret``.
        dex_secret: Secret with the manager client's shared ``secret``.
        tls_secret: Key pair Dex serves with; unused under certificate management.
        certificate_management: CSR settings, or None when disabled.
        username_claim: Claim used as the user name.
        groups_claim: Claim holding group membership, if any.
        scopes: Scopes requested from the upstream provider.
        operator_namespace: Namespace the certificate secret is created in.

    """

    manager_domain: str
    issuer_url: str
    oidc_secret: client.V1Secret
    dex_secret: client.V1Secret
    tls_secret: client.V1Secret | None = None
    certificate_management: CertificateManagement | None = None
    username_claim: str = "email"
    groups_claim: str = ""
    scopes: tuple[str, ...] = ("openid", "email", "profile")
    operator_namespace: str = DEFAULT_OPERATOR_NAMESPACE

    def connector(self) -> dict[str, Any]:
        config: dict[str, Any] = {
            "issuer": self.issuer_url,
            "clientID": f"${CLIENT_ID_ENV}",
            "clientSecret": f"${CLIENT_SECRET_ENV}",
            "redirectURI": f"{self.manager_domain}/dex/callback",
            "scopes": list(self.scopes),
            "userNameKey": self.username_claim,
        }
        if self.groups_claim:
            config["claimMapping"] = {"groups": self.groups_claim}
        return {"id": "oidc", "name": "oidc", "type": "oidc", "config": config}

    def _source_secrets(self) -> list[client.V1Secret]:
        secrets = [self.oidc_secret, self.dex_secret]
        if self.certificate_management is None and self.tls_secret is not None:
            secrets.append(self.tls_secret)
        return secrets

    def required_secrets(self, namespace: str) -> list[client.V1Secret]:
        return copy_to_namespace(namespace, *self._source_secrets())

    def required_env(self, prefix: str) -> list[client.V1EnvVar]:
        oidc_name = self.oidc_secret.metadata.name
        return [
            _secret_env(f"{prefix}{CLIENT_ID_ENV}", oidc_name, CLIENT_ID_SECRET_FIELD),
            _secret_env(f"{prefix}{CLIENT_SECRET_ENV}", oidc_name, CLIENT_SECRET_SECRET_FIELD),
            _secret_env(f"{prefix}{DEX_SECRET_ENV}", self.dex_secret.metadata.name, DEX_SECRET_FIELD),
        ]

    def required_volumes(self) -> list[client.V1Volume]:
        if self.certificate_management is not None or self.tls_secret is None:
            tls_volume = client.V1Volume(name=DEX_TLS_VOLUME_NAME, empty_dir=client.V1EmptyDirVolumeSource())
        else:
            tls_volume = client.V1Volume(
                name=DEX_TLS_VOLUME_NAME,
                secret=client.V1SecretVolumeSource(secret_name=self.tls_secret.metadata.name),
            )
        config_volume = client.V1Volume(
            name=DEX_CONFIG_VOLUME_NAME,
            config_map=client.V1ConfigMapVolumeSource(
                name=DEX_OBJECT_NAME,
                items=[client.V1KeyToPath(key=DEX_CONFIG_KEY, path=DEX_CONFIG_KEY)],
            ),
        )
        return [tls_volume, config_volume]

    def required_volume_mounts(self) -> list[client.V1VolumeMount]:
        return [
            client.V1VolumeMount(name=DEX_TLS_VOLUME_NAME, mount_path=DEX_TLS_MOUNT_PATH, read_only=True),
            client.V1VolumeMount(name=DEX_CONFIG_VOLUME_NAME, mount_path=DEX_CONFIG_MOUNT_PATH, read_only=True),
        ]

    def required_annotations(self) -> dict[str, str]:
        annotations: dict[str, str] = {}
        for secret in self._source_secrets():
            annotations[f"{_ANNOTATION_PREFIX}/{secret.metadata.name}"] = annotation_hash(secret.data)
        return annotations

    def manager_uri(self) -> str:
        return self.manager_domain

    def create_cert_secret(self) -> client.V1Secret | None:
        """Return the certificate-only secret clients use to trust Dex.

        Under certificate management Dex's certificate is issued at pod
        start, so clients trust the signing CA instead.
        """
        if self.certificate_management is not None:
            cert = self.certificate_management.ca_cert
        elif self.tls_secret is not None:
            cert = decode_value(self.tls_secret, TLS_CERT_KEY)
        else:
            return None
        return create_certificate_secret(cert, DEX_CERT_SECRET_NAME, self.operator_namespace)
