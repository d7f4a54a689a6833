"""Tests for triples.py - triples file similarity source."""

import logging
import math

import pytest

from statix.sources.base import SimilaritySource
from statix.sources.triples import RDF_TYPE, TripleSimilaritySource, read_triples

DATASET = f"""# Sample dataset
<a> <p1> "x" .
<a> <p2> <b> .
<a> {RDF_TYPE} <T1> .
<b> <p1> "y y" .
<b> <p2> <a> .
<b> {RDF_TYPE} <T1> .
<c> <p3> "z" .
<c> {RDF_TYPE} <T2> .
<d> <p1> "w"@en .
"""


@pytest.fixture
def triples_path(tmp_path):
    path = tmp_path / "sample.nt"
    path.write_text(DATASET)
    return path


@pytest.fixture
def source(triples_path):
    source = TripleSimilaritySource()
    source.load_input_data(triples_path)
    return source


class TestReadTriples:
    """Tests for read_triples function."""

    def test_reads_statements(self, triples_path):
        triples = list(read_triples(triples_path))

        assert len(triples) == 9
        assert triples[0] == ("<a>", "<p1>", '"x"')
        assert triples[3] == ("<b>", "<p1>", '"y y"')

    def test_malformed_statement_is_skipped(self, tmp_path, caplog):
        path = tmp_path / "bad.nt"
        path.write_text("<x> <y>\n<a> <p> <b> .\n")

        with caplog.at_level(logging.WARNING):
            triples = list(read_triples(path))

        assert triples == [("<a>", "<p>", "<b>")]
        assert "Invalid statement" in caplog.text

    def test_dirty_skips_duplicates(self, tmp_path):
        path = tmp_path / "dup.nt"
        path.write_text("<a> <p> <b> .\n<a> <p> <b> .\n")

        assert len(list(read_triples(path))) == 2
        assert len(list(read_triples(path, dirty=True))) == 1


class TestTripleSimilaritySource:
    """Tests for TripleSimilaritySource."""

    def test_is_similarity_source(self):
        assert isinstance(TripleSimilaritySource(), SimilaritySource)

    def test_occurrences(self, triples_path):
        occurrences = TripleSimilaritySource().load_input_data(triples_path)

        assert occurrences == {"<p1>": 3, "<p2>": 2, "<p3>": 1}

    def test_instances_and_ids(self, source):
        assert list(source.instances()) == ["<a>", "<b>", "<c>", "<d>"]
        assert [source.instance_id(i) for i in source.instances()] == [0, 1, 2, 3]

    def test_filter_untyped_inverts_ids(self, triples_path, tmp_path):
        source = TripleSimilaritySource()
        id_map = tmp_path / "ids.txt"

        source.load_input_data(triples_path, filter_untyped=True, id_map_path=id_map)

        assert source.instance_id("<a>") == 0
        assert source.instance_id("<d>") == -4
        lines = id_map.read_text().splitlines()
        assert lines[0] == "# Id\tName"
        assert lines[-1] == "-4\t<d>"

    def test_cosine_similarity(self, source):
        assert source.similarity("<a>", "<b>") == pytest.approx(1.0)
        assert source.similarity("<a>", "<c>") == 0.0
        assert source.similarity("<a>", "<d>") == pytest.approx(1 / math.sqrt(2))

    def test_similarity_is_symmetric(self, source):
        for jaccard in (False, True):
            assert source.similarity("<a>", "<d>", jaccard) == source.similarity(
                "<d>", "<a>", jaccard
            )

    def test_jaccard_similarity(self, source):
        assert source.similarity("<a>", "<d>", jaccard=True) == pytest.approx(0.5)
        assert source.similarity("<a>", "<c>", jaccard=True) == 0.0

    def test_property_weights_update_similarity(self, source):
        before = source.similarity("<a>", "<d>")
        source.property_weights = {"<p2>": 0.0}

        assert before < 1.0
        assert source.similarity("<a>", "<d>") == pytest.approx(1.0)

    def test_learned_weights(self, triples_path):
        source = TripleSimilaritySource()
        occurrences = source.load_input_data(triples_path)

        weights = source.load_gt_data(triples_path, occurrences)

        assert set(weights) == set(occurrences)
        assert all(0.0 <= w <= 1.0 for w in weights.values())
        assert weights["<p3>"] == pytest.approx(1.0)

    def test_learning_requires_several_types(self, tmp_path, caplog):
        path = tmp_path / "single.nt"
        path.write_text(f"<a> <p> <b> .\n<a> {RDF_TYPE} <T> .\n")

        with caplog.at_level(logging.WARNING):
            weights = TripleSimilaritySource().load_gt_data(path, {"<p>": 1})

        assert weights == {}
        assert "can't be learned" in caplog.text
