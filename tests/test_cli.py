"""Tests for the command line interface."""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from statix import __version__
from statix.cli import main
from statix.sources.triples import RDF_TYPE


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def dataset(tmp_path):
    path = tmp_path / "data.nt"
    path.write_text(
        "\n".join(
            [
                '<a> <name> "a" .',
                "<a> <knows> <b> .",
                f"<a> {RDF_TYPE} <Person> .",
                '<b> <name> "b" .',
                "<b> <knows> <a> .",
                f"<b> {RDF_TYPE} <Person> .",
                '<c> <title> "c" .',
                f"<c> {RDF_TYPE} <Book> .",
            ]
        )
        + "\n"
    )
    return path


class TestMain:
    """Tests for the command group."""

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner):
        result = runner.invoke(main, [])

        assert result.exit_code == 0
        assert "cluster" in result.output
        assert "network" in result.output


class TestNetworkCommand:
    """Tests for the network command."""

    def test_default_output(self, runner, dataset):
        result = runner.invoke(main, ["network", str(dataset), "--no-rich"])

        assert result.exit_code == 0, result.output
        output = dataset.with_suffix(".rcg")
        assert output.read_text().startswith(
            "/Graph weighted:1 validated:1\n/Nodes 3\n/Edges\n"
        )

    def test_explicit_output_with_cutting(self, runner, dataset, tmp_path):
        output = tmp_path / "net.rcg"

        result = runner.invoke(
            main,
            ["network", str(dataset), "-o", str(output), "--links-cut", "0.5"],
        )

        assert result.exit_code == 0, result.output
        assert "# Note: duplicated edges" in output.read_text()

    def test_links_cut_out_of_range(self, runner, dataset):
        result = runner.invoke(main, ["network", str(dataset), "--links-cut", "1.5"])

        assert result.exit_code == 2

    def test_missing_dataset(self, runner, tmp_path):
        result = runner.invoke(main, ["network", str(tmp_path / "missing.nt")])

        assert result.exit_code == 2


class TestClusterCommand:
    """Tests for the cluster command."""

    def test_default_output(self, runner, dataset):
        result = runner.invoke(main, ["cluster", str(dataset)])

        assert result.exit_code == 0, result.output
        lines = dataset.with_suffix(".cnl").read_text().splitlines()
        assert lines[0] == "# Clusters: 2, Nodes: 3, Fuzzy: 0"

    def test_options_are_passed(self, runner, dataset, tmp_path):
        output = tmp_path / "types.cnl"
        with patch("statix.pipeline.Statix.cluster") as cluster:
            result = runner.invoke(
                main,
                [
                    "cluster",
                    str(dataset),
                    "-o",
                    str(output),
                    "--scale",
                    "2",
                    "--multilevel",
                    "--reduction",
                    "mean",
                    "--reduce-by-weight",
                    "--weigh-node",
                    "--jaccard",
                    "--links-cut",
                    "0.3",
                    "-f",
                ],
            )

        assert result.exit_code == 0, result.output
        path, options, weigh_node, jaccard, links_cut = cluster.call_args.args
        assert path == output
        assert options.scale == 2.0
        assert options.multilevel
        assert options.reduction == "mean"
        assert options.reduce_by_weight
        assert options.filter_members
        assert (weigh_node, jaccard, links_cut) == (True, True, 0.3)

    def test_hints_file(self, runner, dataset, tmp_path):
        hints = tmp_path / "hints.ipl"
        hints.write_text("0.9\t<name>\n")

        result = runner.invoke(main, ["cluster", str(dataset), "--hints", str(hints)])

        assert result.exit_code == 0, result.output

    def test_missing_hints_file(self, runner, dataset, tmp_path):
        result = runner.invoke(
            main, ["cluster", str(dataset), "--hints", str(tmp_path / "no.ipl")]
        )

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_hints_and_labeled_are_exclusive(self, runner, dataset):
        result = runner.invoke(
            main,
            ["cluster", str(dataset), "--hints", "-", "--labeled", str(dataset)],
        )

        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    def test_labeled_dataset(self, runner, dataset):
        result = runner.invoke(main, ["cluster", str(dataset), "--labeled", str(dataset)])

        assert result.exit_code == 0, result.output

    def test_empty_dataset(self, runner, tmp_path):
        path = tmp_path / "empty.nt"
        path.write_text("# nothing here\n")

        result = runner.invoke(main, ["cluster", str(path)])

        assert result.exit_code == 0
        assert not (tmp_path / "empty.cnl").exists()
