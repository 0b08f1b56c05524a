"""Secret construction functions.

This module provides functions for building Kubernetes Secret objects
from raw key material, and for hashing secret contents into pod
annotations so that workloads restart when their secrets change.
"""

import base64
import hashlib

from kubernetes import client

_OPAQUE = "Opaque"
_TLS = "kubernetes.io/tls"

TLS_PRIVATE_KEY_KEY = "tls.key"
TLS_CERT_KEY = "tls.crt"


def _encode(value: bytes) -> str:
    return base64.b64encode(value).decode("ascii")


def new_secret(
    name: str,
    namespace: str,
    data: dict[str, bytes],
    secret_type: str = _OPAQUE,
) -> client.V1Secret:
    """Build a Secret from raw (unencoded) values.

    Args:
        name: The name of the secret.
        namespace: The namespace of the secret.
        data: Key to raw bytes mapping; values are base64 encoded here.
        secret_type: The Kubernetes secret type.

    Returns:
        A V1Secret ready to be emitted.

    """
    return client.V1Secret(
        api_version="v1",
        kind="Secret",
        metadata=client.V1ObjectMeta(name=name, namespace=namespace),
        type=secret_type,
        data={key: _encode(value) for key, value in data.items()},
    )


def create_tls_secret(name: str, namespace: str, key_pem: bytes, cert_pem: bytes) -> client.V1Secret:
    """Build a ``kubernetes.io/tls`` Secret holding a key pair.

    Args:
        name: The name of the secret.
        namespace: The namespace of the secret.
        key_pem: PEM encoded private key.
        cert_pem: PEM encoded certificate.

    Returns:
        A V1Secret with ``tls.key`` and ``tls.crt`` entries.

    """
    return new_secret(
        name,
        namespace,
        {TLS_PRIVATE_KEY_KEY: key_pem, TLS_CERT_KEY: cert_pem},
        secret_type=_TLS,
    )


def create_certificate_secret(cert_pem: bytes, name: str, namespace: str) -> client.V1Secret:
    """Build a Secret holding only a certificate.

    Clients mount this secret to trust a server without gaining access
    to its private key.

    Args:
        cert_pem: PEM encoded certificate.
        name: The name of the secret.
        namespace: The namespace of the secret.

    Returns:
        A V1Secret with a single ``tls.crt`` entry.

    """
    return new_secret(name, namespace, {TLS_CERT_KEY: cert_pem})


def decode_value(secret: client.V1Secret, key: str) -> bytes:
    """Return the raw bytes stored under a key of a Secret.

    Args:
        secret: The secret to read.
        key: The data key.

    Returns:
        The decoded value, or empty bytes if the key is missing.

    """
    encoded = (secret.data or {}).get(key)
    if encoded is None:
        return b""
    return base64.b64decode(encoded)


def annotation_hash(data: dict[str, str] | None) -> str:
    """Hash secret data into a stable annotation value.

    Keys are visited in sorted order so equal data always yields the
    same hash regardless of insertion order.

    Args:
        data: The secret's data mapping (base64 text values).

    Returns:
        The hex encoded SHA-1 digest.

    """
    digest = hashlib.sha1()
    for key in sorted(data or {}):
        digest.update(key.encode())
        digest.update(b"\x00")
        digest.update(data[key].encode())
        digest.update(b"\x00")
    return digest.hexdigest()
