"""Fixed identifiers of the rendered Dex objects.

These names are shared with the reconciliation engine and the other
components that talk to Dex, so they must not change.
"""

# Manifest object variables
DEX_NAMESPACE = "tigera-dex"
DEX_OBJECT_NAME = "tigera-dex"
DEX_PORT = 5556

# Secret with only a cert that clients mount in order to trust Dex
DEX_CERT_SECRET_NAME = "tigera-dex-tls-crt"
# Secret that Dex mounts, containing a key and a cert
DEX_TLS_SECRET_NAME = "tigera-dex-tls"
# Secret holding the shared secret of the static manager client
DEX_SECRET_NAME = "tigera-dex"
# Secret holding the upstream OIDC client credentials
OIDC_SECRET_NAME = "tigera-oidc-credentials"

DEX_CLIENT_ID = "tigera-manager"
DEX_CLIENT_NAME = "Calico Enterprise Manager"
DEX_SECRET_ENV = "DEX_SECRET"

DEX_CONFIG_KEY = "config.yaml"
DEX_CONFIG_MOUNT_PATH = "/etc/dex/baseCfg"
DEX_TLS_MOUNT_PATH = "/etc/dex/tls"
DEX_TLS_VOLUME_NAME = "tls"
DEX_CONFIG_VOLUME_NAME = "config"

DEFAULT_OPERATOR_NAMESPACE = "tigera-operator"
