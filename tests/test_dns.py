"""Tests for dns.py module."""

from dex_render.dns import service_dns_names


def test_service_dns_names_default_domain():
    """Test the names of a service in the default cluster domain."""
    assert service_dns_names("tigera-dex", "tigera-dex") == [
        "tigera-dex",
        "tigera-dex.tigera-dex",
        "tigera-dex.tigera-dex.svc",
        "tigera-dex.tigera-dex.svc.cluster.local",
    ]


def test_service_dns_names_custom_domain():
    """Test that the cluster domain only affects the fully qualified name."""
    names = service_dns_names("svc", "ns", "corp.internal")
    assert names[-1] == "svc.ns.svc.corp.internal"
    assert names[:3] == ["svc", "svc.ns", "svc.ns.svc"]
