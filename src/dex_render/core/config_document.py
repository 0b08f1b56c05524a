"""Dex configuration document.

This module builds the nested document Dex reads at startup and encodes
it as YAML. The document is a plain tree of mappings, lists and scalars
so that the identity provider's connector can be embedded without this
package knowing its schema.
"""

from typing import Any

import yaml
from icecream import ic

from dex_render.constants import (
    DEX_CLIENT_ID,
    DEX_CLIENT_NAME,
    DEX_PORT,
    DEX_SECRET_ENV,
    DEX_TLS_MOUNT_PATH,
)
from dex_render.exceptions import ConfigSerializationError

_LOOPBACK_HOSTS = ("localhost", "127.0.0.1")
_CALLBACK_PATHS = (
    "/login/oidc/callback",
    "/tigera-kibana/api/security/oidc/callback",
)

# Callbacks for port-forwarded access to the manager UI and Kibana
DEFAULT_REDIRECT_URIS = (
    "https://localhost:9443/login/oidc/callback",
    "https://127.0.0.1:9443/login/oidc/callback",
    "https://localhost:9443/tigera-kibana/api/security/oidc/callback",
    "https://127.0.0.1:9443/tigera-kibana/api/security/oidc/callback",
)


def redirect_uris(manager_uri: str) -> list[str]:
    """Compute the redirect URIs of the manager's static client.

    Args:
        manager_uri: Public URI of the manager; may be empty.

    Returns:
        The four loopback callbacks, plus the manager's own UI and Kibana
        callbacks when the URI is set and is not a loopback address.

    """
    uris = list(DEFAULT_REDIRECT_URIS)
    if manager_uri and not any(host in manager_uri for host in _LOOPBACK_HOSTS):
        uris.extend(f"{manager_uri}{path}" for path in _CALLBACK_PATHS)
    ic(uris)
    return uris


def build_config_document(manager_uri: str, connector: dict[str, Any]) -> dict[str, Any]:
    """Build the Dex configuration as a plain document tree.

    Args:
        manager_uri: Public URI of the manager; Dex is served below it.
        connector: The identity provider's connector, embedded as-is.

    Returns:
        The configuration document.

    """
    return {
        "issuer": f"{manager_uri}/dex",
        "storage": {
            "type": "kubernetes",
            "config": {
                "inCluster": True,
            },
        },
        "web": {
            "https": f"0.0.0.0:{DEX_PORT}",
            "tlsCert": f"{DEX_TLS_MOUNT_PATH}/tls.crt",
            "tlsKey": f"{DEX_TLS_MOUNT_PATH}/tls.key",
            "allowedOrigins": ["*"],
            "discoveryAllowedOrigins": ["*"],
        },
        "connectors": [connector],
        "oauth2": {
            "skipApprovalScreen": True,
            "responseTypes": ["id_token", "code", "token"],
        },
        "staticClients": [
            {
                "id": DEX_CLIENT_ID,
                "redirectURIs": redirect_uris(manager_uri),
                "name": DEX_CLIENT_NAME,
                "secretEnv": DEX_SECRET_ENV,
            },
        ],
    }


def serialize_config_document(document: dict[str, Any]) -> str:
    """Encode a configuration document as YAML.

    Keys are sorted so equal documents always encode to identical text.

    Args:
        document: The document tree.

    Returns:
        The YAML text.

    Raises:
        ConfigSerializationError: If the tree holds a value YAML cannot
            represent. This is a programming error.

    """
    try:
        return yaml.safe_dump(document, default_flow_style=False, sort_keys=True)
    except yaml.YAMLError as err:
        raise ConfigSerializationError(f"Failed to encode Dex configuration: {err}") from err
