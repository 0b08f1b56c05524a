"""Tests for cli.py module."""

from unittest.mock import patch

import click
import pytest
import yaml
from click.testing import CliRunner

from dex_render import __version__
from dex_render.cli import build_component, cli, write_output


def _args(input_files, *extra):
    args = ["-i", input_files["installation"], "-p", input_files["identity_provider"]]
    for path in input_files["secrets"]:
        args.extend(["-s", path])
    return [*args, *extra]


class TestCliVersion:
    """Tests for version command."""

    def test_version_flag(self):
        """Test --version flag prints version."""
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_version_short_flag(self):
        """Test -v flag prints version."""
        runner = CliRunner()
        result = runner.invoke(cli, ["-v"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestCliHelp:
    """Tests for help output."""

    def test_help_flag(self):
        """Test --help flag shows help text."""
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "Render the Kubernetes objects that run Dex" in result.output
        assert "--installation" in result.output
        assert "--identity-provider" in result.output
        assert "--image-set" in result.output
        assert "--pull-secret" in result.output
        assert "--replicas" in result.output


class TestCliRender:
    """Tests for rendering through the CLI."""

    def test_missing_required_inputs(self):
        """Test usage error without installation and identity provider."""
        runner = CliRunner()
        result = runner.invoke(cli, [])

        assert result.exit_code == 2
        assert "--installation and --identity-provider are required" in result.output

    def test_render_to_file(self, tmp_path, input_files):
        """Test that all objects are written to the output file."""
        output = tmp_path / "dex.yaml"
        runner = CliRunner()
        result = runner.invoke(cli, _args(input_files, "-o", str(output)))

        assert result.exit_code == 0
        docs = list(yaml.safe_load_all(output.read_text()))
        kinds = [doc["kind"] for doc in docs]
        assert kinds[:6] == ["ServiceAccount", "Deployment", "Service", "ClusterRole", "ClusterRoleBinding", "ConfigMap"]
        assert len(docs) == 13

        deployment = docs[1]
        (container,) = deployment["spec"]["template"]["spec"]["containers"]
        assert container["image"] == "registry.example.com/mirror/dex:v3.8.0"
        assert deployment["spec"]["template"]["spec"]["nodeSelector"] == {"role": "control"}

    def test_render_to_stdout(self, input_files):
        """Test that manifests are printed when no output file is given."""
        runner = CliRunner()
        result = runner.invoke(cli, _args(input_files))

        assert result.exit_code == 0
        assert "kind: Deployment" in result.output
        assert "name: tigera-dex-tls-crt" in result.output

    def test_warns_without_image_set(self, tmp_path, input_files):
        """Test that rendering without pins warns about tag references."""
        runner = CliRunner()
        with (
            patch("dex_render.console.warning") as mock_warning,
            patch("dex_render.console.info") as mock_info,
        ):
            result = runner.invoke(cli, _args(input_files, "-o", str(tmp_path / "dex.yaml")))

        assert result.exit_code == 0
        mock_warning.assert_called_once()
        assert "No ImageSet given" in mock_warning.call_args[0][0]
        mock_info.assert_not_called()

    def test_reports_image_set_pins(self, tmp_path, input_files, sample_image_set_yaml):
        """Test that the loaded ImageSet is reported instead of a warning."""
        image_set = tmp_path / "imageset.yaml"
        image_set.write_text(sample_image_set_yaml)

        runner = CliRunner()
        with (
            patch("dex_render.console.warning") as mock_warning,
            patch("dex_render.console.info") as mock_info,
        ):
            result = runner.invoke(
                cli, _args(input_files, "--image-set", str(image_set), "-o", str(tmp_path / "dex.yaml"))
            )

        assert result.exit_code == 0
        mock_warning.assert_not_called()
        assert "Pinning 1 image(s)" in mock_info.call_args[0][0]

    def test_render_with_image_set(self, tmp_path, input_files, sample_image_set_yaml):
        """Test that pinned images resolve to digests."""
        image_set = tmp_path / "imageset.yaml"
        image_set.write_text(sample_image_set_yaml)
        output = tmp_path / "dex.yaml"

        runner = CliRunner()
        result = runner.invoke(cli, _args(input_files, "--image-set", str(image_set), "-o", str(output)))

        assert result.exit_code == 0
        assert "registry.example.com/mirror/dex@sha256:dex" in output.read_text()

    def test_unresolvable_image(self, tmp_path, input_files):
        """Test that missing image pins fail the render."""
        image_set = tmp_path / "imageset.yaml"
        image_set.write_text("kind: ImageSet\nmetadata:\n  name: empty\nspec:\n  images: []\n")

        runner = CliRunner()
        result = runner.invoke(cli, _args(input_files, "--image-set", str(image_set)))

        assert result.exit_code == 1
        assert "Failed to resolve 1 image(s)" in result.output

    def test_missing_secret(self, input_files):
        """Test that a missing credential secret fails with a clear error."""
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["-i", input_files["installation"], "-p", input_files["identity_provider"]],
        )

        assert result.exit_code == 1
        assert "Required secret(s) not provided" in result.output

    def test_replicas_must_be_positive(self, input_files):
        """Test that zero replicas is rejected."""
        runner = CliRunner()
        result = runner.invoke(cli, _args(input_files, "--replicas", "0"))

        assert result.exit_code == 2

    def test_replicas_and_cluster_domain(self, tmp_path, input_files):
        """Test that replicas reach the deployment."""
        output = tmp_path / "dex.yaml"
        runner = CliRunner()
        result = runner.invoke(
            cli, _args(input_files, "--replicas", "3", "--cluster-domain", "corp.internal", "-o", str(output))
        )

        assert result.exit_code == 0
        deployment = list(yaml.safe_load_all(output.read_text()))[1]
        assert deployment["spec"]["replicas"] == 3


class TestBuildComponent:
    """Tests for build_component function."""

    def test_build_component(self, input_files):
        """Test that inputs are wired into the component."""
        component = build_component(
            input_files["installation"],
            input_files["identity_provider"],
            tuple(input_files["secrets"]),
            (),
            cluster_domain="cluster.local",
            operator_namespace="tigera-operator",
            replicas=2,
        )

        assert component.installation.registry == "registry.example.com"
        assert component.replicas == 2
        assert component.pull_secrets == []


class TestWriteOutput:
    """Tests for write_output function."""

    def test_write_to_stdout(self):
        """Test that text is echoed without an output file."""
        with patch("dex_render.cli.click.echo") as mock_echo:
            write_output("kind: Secret\n", None)
            mock_echo.assert_called_once_with("kind: Secret\n", nl=False)

    def test_write_to_file(self, tmp_path):
        """Test that text is written to the output file."""
        output = tmp_path / "out.yaml"
        write_output("kind: Secret\n", str(output))
        assert output.read_text() == "kind: Secret\n"

    def test_unwritable_path(self, tmp_path):
        """Test error for an output path that cannot be written."""
        with pytest.raises(click.ClickException, match="Cannot write to output path"):
            write_output("kind: Secret\n", str(tmp_path / "missing" / "out.yaml"))
