"""
Type inference pipeline.

Loads the dataset through the similarity source, infers the property
weights, forms the similarity graph of the instances and clusters it.
"""

import logging
from pathlib import Path

from statix.clustering import AgglomerativeEngine, ClusteringEngine, ClusteringOptions
from statix.graph import Graph, GraphBuilder
from statix.significance import EmptyDatasetError, SignificanceEngine, default_weights
from statix.significance.elicitation import PromptFn
from statix.sources import SimilaritySource, TripleSimilaritySource

logger = logging.getLogger(__name__)


class Statix:
    """Statistical type inference of the dataset instances."""

    def __init__(
        self,
        source: SimilaritySource | None = None,
        engine: ClusteringEngine | None = None,
        prompt: PromptFn | None = None,
        use_rich: bool = True,
    ):
        """Initialize the pipeline.

        Args:
            source: Similarity source, triples file source by default
            engine: Clustering engine, agglomerative clustering by default
            prompt: Operator input function for the interactive hints
            use_rich: Display rich progress in interactive environments
        """
        self.source: SimilaritySource | None = (
            source if source is not None else TripleSimilaritySource()
        )
        self.engine = engine or AgglomerativeEngine()
        self.prompt = prompt
        self.use_rich = use_rich

    def _require_source(self) -> SimilaritySource:
        if self.source is None:
            raise RuntimeError("The similarity source has already been released")
        return self.source

    def load_dataset(
        self,
        dataset: str | Path,
        filter_untyped: bool = False,
        id_map: str | Path | None = None,
        hints: str | None = None,
        dirty: bool = False,
    ) -> dict[str, float]:
        """Load the dataset and infer the property weights.

        Args:
            dataset: Input dataset file name
            filter_untyped: Filter out the untyped instances by inverting their ids
            id_map: Optional file name to output the instance id mapping
            hints: Hints specifier, see HintSpec
            dirty: The labeled data might contain duplicated triples

        Returns:
            Applied property weights

        Raises:
            EmptyDatasetError: If the dataset has no properties
        """
        source = self._require_source()
        occurrences = source.load_input_data(dataset, filter_untyped, id_map)
        engine = SignificanceEngine(learner=source, prompt=self.prompt, dirty=dirty)
        weights = engine.infer(occurrences, hints, dataset)
        source.property_weights = weights
        return weights

    def load_datasets(
        self,
        dataset: str | Path,
        labeled: str | Path,
        filter_untyped: bool = False,
        id_map: str | Path | None = None,
        dirty: bool = False,
    ) -> dict[str, float]:
        """Load the input dataset and learn all property weights from the labeled one.

        Args:
            dataset: Input dataset file name
            labeled: Labeled (ground-truth) dataset file name
            filter_untyped: Filter out the untyped instances by inverting their ids
            id_map: Optional file name to output the instance id mapping
            dirty: The labeled data might contain duplicated triples

        Returns:
            Applied property weights
        """
        source = self._require_source()
        occurrences = source.load_input_data(dataset, filter_untyped, id_map)
        if not occurrences:
            raise EmptyDatasetError(
                f"There are not any properties to be processed in the dataset: {dataset}"
            )
        weights = default_weights(occurrences)
        weights.update(source.load_gt_data(labeled, occurrences, dirty))
        source.property_weights = weights
        return weights

    def _builder(self, weigh_node: bool, jaccard: bool, links_cut: float) -> GraphBuilder:
        return GraphBuilder(
            self._require_source(),
            weigh_node=weigh_node,
            jaccard=jaccard,
            links_cut=links_cut,
            use_rich=self.use_rich,
        )

    def build_graph(
        self, weigh_node: bool = False, jaccard: bool = False, links_cut: float = 0.0
    ) -> Graph:
        """Build the input graph for the clustering."""
        return self._builder(weigh_node, jaccard, links_cut).build()

    def save_net(
        self,
        output_path: str | Path,
        weigh_node: bool = False,
        jaccard: bool = False,
        links_cut: float = 0.0,
    ) -> None:
        """Save the clustering input network to the specified file."""
        self._builder(weigh_node, jaccard, links_cut).save(output_path)

    def cluster(
        self,
        output_path: str | Path,
        options: ClusteringOptions | None = None,
        weigh_node: bool = False,
        jaccard: bool = False,
        links_cut: float = 0.0,
    ) -> list[list[int]]:
        """Infer the types: build the graph and cluster it.

        The similarity source is released once the graph is formed.

        Returns:
            Output clusters as lists of the member ids
        """
        options = options or ClusteringOptions()
        graph = self.build_graph(weigh_node, jaccard, links_cut)
        # The similarity source is not required any more
        self.source = None

        logger.info("Starting the hierarchy building")
        clusters = self.engine.cluster(graph, output_path, options)
        logger.info(f"The types inference is completed to {output_path}")
        return clusters
