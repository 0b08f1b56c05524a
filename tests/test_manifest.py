"""Tests for manifest.py module."""

import yaml
from kubernetes import client

from dex_render.core.manifest import dump_manifests, to_manifest


class TestToManifest:
    """Tests for converting objects into plain manifests."""

    def test_camel_case_and_unset_fields_dropped(self):
        """Test that keys use API names and None fields are omitted."""
        account = client.V1ServiceAccount(
            api_version="v1",
            kind="ServiceAccount",
            metadata=client.V1ObjectMeta(name="tigera-dex", namespace="tigera-dex"),
            automount_service_account_token=False,
        )

        assert to_manifest(account) == {
            "apiVersion": "v1",
            "kind": "ServiceAccount",
            "metadata": {"name": "tigera-dex", "namespace": "tigera-dex"},
            "automountServiceAccountToken": False,
        }


class TestDumpManifests:
    """Tests for multi-document YAML output."""

    def test_one_document_per_object(self, dex_secret, pull_secret):
        """Test that each object becomes a document, in order."""
        docs = list(yaml.safe_load_all(dump_manifests([dex_secret, pull_secret])))

        assert [doc["metadata"]["name"] for doc in docs] == ["tigera-dex", "pull-secret"]
        assert docs[1]["type"] == "kubernetes.io/dockerconfigjson"

    def test_empty(self):
        """Test that no objects yield no documents."""
        assert list(yaml.safe_load_all(dump_manifests([]))) == []

    def test_documents_match_to_manifest(self, dex_secret, oidc_secret):
        """Test that each document is the object's plain manifest."""
        docs = list(yaml.safe_load_all(dump_manifests([dex_secret, oidc_secret])))
        assert docs == [to_manifest(dex_secret), to_manifest(oidc_secret)]
