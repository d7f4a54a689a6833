"""Tests for the type inference pipeline."""

from unittest.mock import MagicMock

import pytest

from statix.clustering import ClusteringOptions
from statix.graph import Graph, Link
from statix.pipeline import Statix
from statix.significance import EmptyDatasetError
from statix.sources.triples import RDF_TYPE


@pytest.fixture
def source(make_source):
    return make_source(
        {("1", "2"): 0.2, ("1", "3"): 0.0, ("2", "3"): 0.6},
        occurrences={"p1": 100, "p2": 50, "p3": 3},
        learned={"p1": 0.5},
    )


class TestStatix:
    """Tests for Statix pipeline orchestration."""

    def test_load_dataset_applies_weights(self, source, dataset_path):
        statix = Statix(source=source, engine=MagicMock(), use_rich=False)

        weights = statix.load_dataset(dataset_path)

        assert source.property_weights is weights
        assert weights["p1"] == pytest.approx(0.1)

    def test_load_dataset_with_hints(self, source, tmp_path, dataset_path):
        hints = tmp_path / "hints.ipl"
        hints.write_text("0.9\tp2\n")
        statix = Statix(source=source, engine=MagicMock(), use_rich=False)

        weights = statix.load_dataset(dataset_path, hints=str(hints))

        assert weights["p2"] == 0.9

    def test_empty_dataset(self, make_source, dataset_path):
        statix = Statix(source=make_source({}), engine=MagicMock(), use_rich=False)

        with pytest.raises(EmptyDatasetError):
            statix.load_dataset(dataset_path)

    def test_load_datasets_overlays_learned(self, source, tmp_path, dataset_path):
        labeled = tmp_path / "labeled.nt"
        statix = Statix(source=source, engine=MagicMock(), use_rich=False)

        weights = statix.load_datasets(dataset_path, labeled, dirty=True)

        assert weights["p1"] == 0.5
        assert weights["p2"] == pytest.approx(50**-0.5)
        assert source.gt_calls == [
            (str(labeled), {"p1": 100, "p2": 50, "p3": 3}, True)
        ]

    def test_build_graph(self, source):
        graph = Statix(source=source, engine=MagicMock(), use_rich=False).build_graph()

        assert graph.nodes == {1: [Link(2, 0.2)], 2: [Link(3, 0.6)], 3: []}

    def test_save_net(self, source, tmp_path):
        path = tmp_path / "net.rcg"

        Statix(source=source, engine=MagicMock(), use_rich=False).save_net(path)

        assert path.read_text().startswith("/Graph weighted:1 validated:1\n/Nodes 3\n")

    def test_cluster_releases_source(self, source, tmp_path):
        engine = MagicMock()
        engine.cluster.return_value = [[1, 2], [3]]
        statix = Statix(source=source, engine=engine, use_rich=False)
        options = ClusteringOptions(scale=2.0)

        clusters = statix.cluster(tmp_path / "out.cnl", options)

        assert clusters == [[1, 2], [3]]
        graph, path, passed = engine.cluster.call_args.args
        assert isinstance(graph, Graph)
        assert graph.node_count == 3
        assert path == tmp_path / "out.cnl"
        assert passed is options
        assert statix.source is None
        with pytest.raises(RuntimeError):
            statix.build_graph()

    def test_end_to_end(self, tmp_path):
        dataset = tmp_path / "data.nt"
        dataset.write_text(
            "\n".join(
                [
                    '<a> <name> "a" .',
                    "<a> <knows> <b> .",
                    f"<a> {RDF_TYPE} <Person> .",
                    '<b> <name> "b" .',
                    "<b> <knows> <a> .",
                    f"<b> {RDF_TYPE} <Person> .",
                    '<c> <title> "c" .',
                    "<c> <pages> 10 .",
                    f"<c> {RDF_TYPE} <Book> .",
                    '<d> <title> "d" .',
                    "<d> <pages> 20 .",
                ]
            )
            + "\n"
        )
        output = tmp_path / "data.cnl"
        statix = Statix(use_rich=False)

        statix.load_dataset(dataset, filter_untyped=True)
        clusters = statix.cluster(output, ClusteringOptions(filter_members=True))

        assert sorted(sorted(c) for c in clusters) == [[0, 1], [2]]
        assert output.read_text().startswith("# Clusters: 2, Nodes: 4, Fuzzy: 0")
