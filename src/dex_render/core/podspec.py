"""Pod spec building blocks shared by control plane components."""

from kubernetes import client

NON_ROOT_UID = 10001


def tolerate_master() -> client.V1Toleration:
    """Return the toleration that lets a pod run on master nodes."""
    return client.V1Toleration(key="node-role.kubernetes.io/master", effect="NoSchedule")


def base_security_context() -> client.V1SecurityContext:
    """Return the restrictive security context used by every container."""
    return client.V1SecurityContext(
        allow_privilege_escalation=False,
        privileged=False,
        run_as_non_root=True,
        run_as_group=NON_ROOT_UID,
        run_as_user=NON_ROOT_UID,
    )
