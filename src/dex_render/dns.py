"""Cluster DNS name helpers."""

DEFAULT_CLUSTER_DOMAIN = "cluster.local"


def service_dns_names(service: str, namespace: str, cluster_domain: str = DEFAULT_CLUSTER_DOMAIN) -> list[str]:
    """Return every name a service is reachable by inside the cluster.

    Args:
        service: The service name.
        namespace: The namespace of the service.
        cluster_domain: The cluster DNS domain.

    Returns:
        The short name, namespaced name, ``.svc`` name and fully qualified name.

    """
    return [
        service,
        f"{service}.{namespace}",
        f"{service}.{namespace}.svc",
        f"{service}.{namespace}.svc.{cluster_domain}",
    ]
