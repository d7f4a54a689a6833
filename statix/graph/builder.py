"""
Construction of the clustering input graph from the similarity source.

Every unordered pair of instances is evaluated exactly once. Links of each
source instance can be reduced (cut) to bound the graph density: only the
links not lighter than a margin between the minimal and the average link
weight are retained for the instances having many links.
"""

import logging
import math
from collections import defaultdict
from pathlib import Path

from statix.progress import progress_tracker
from statix.sources.base import SimilaritySource

from .models import Graph, Link
from .sinks import GraphSink, LinkSink, NetworkWriter

logger = logging.getLogger(__name__)


class LinkReductionError(RuntimeError):
    """Links reduction retained no links where some should be retained."""


def reduction_margin(node_count: int) -> int:
    """Minimal number of the instance links to apply the links reduction.

    Small number of links is not reduced, the margin grows sublinearly with
    the number of nodes: 1 - e^-2 = 0.86466.
    """
    return math.ceil(7 + node_count ** (1 - math.exp(-2)))


def reduce_links(
    candidates: list[Link],
    links_cut: float,
    margin: int,
    self_link: Link | None = None,
) -> list[Link]:
    """Reduce the candidate links of a source instance.

    Args:
        candidates: Links of the source instance excluding the self-link
        links_cut: Links cutting ratio E [0, 1), 0 means skip the cutting
        margin: Minimal number of links to apply the reduction
        self_link: Optional self-link of the source instance

    Returns:
        Retained links including the self-link when it is retained

    Raises:
        LinkReductionError: If the reduction dropped all the links
    """
    links = list(candidates)
    if self_link is not None:
        links.append(self_link)
    if links_cut <= 0 or len(links) < margin:
        return links

    wmin = min(ln.weight for ln in candidates)
    wsum = math.fsum(ln.weight for ln in candidates)
    if self_link is not None:
        # The self-weight is not considered for the weights margin evaluation,
        # the sum is extended by the average to retain it for the extended count
        wsum += wsum / len(candidates)

    wmarg = wmin + (wsum / len(links) - wmin) * links_cut
    # Equal weights can yield the average an ulp above the minimum
    if wmarg <= wmin or math.isclose(wmarg, wmin, rel_tol=1e-9):
        return links
    retained = [ln for ln in links if ln.weight >= wmarg]
    if not retained:
        raise LinkReductionError(f"Links should be formed, wmarg: {wmarg}")
    return retained


class GraphBuilder:
    """Forms the links of all instances and emits them to a sink."""

    def __init__(
        self,
        source: SimilaritySource,
        weigh_node: bool = False,
        jaccard: bool = False,
        links_cut: float = 0.0,
        use_rich: bool = True,
    ):
        """Initialize the builder.

        Args:
            source: Similarity source of the instances
            weigh_node: Weigh nodes (node self-weight) besides their links
            jaccard: Use (weighted) Jaccard instead of the cosine similarity
            links_cut: Links cutting ratio E [0, 1), 0 means skip the cutting
            use_rich: Display rich progress in interactive environments
        """
        if not 0 <= links_cut < 1:
            raise ValueError(f"The links cutting ratio is out of [0, 1): {links_cut}")
        self.source = source
        self.weigh_node = weigh_node
        self.jaccard = jaccard
        self.links_cut = links_cut
        self.use_rich = use_rich

    def emit(self, sink: LinkSink) -> None:
        """Evaluate the pairwise similarities and emit the links to the sink.

        The similarity is symmetric, so each pair is evaluated once by the
        earlier enumerated instance. When the links are cut the weight is also
        kept as a back link of the later instance, whose reduction has to
        consider all its links; duplicated edges may then be emitted.
        """
        instances = list(self.source.instances())
        ids = [self.source.instance_id(inst) for inst in instances]
        count = len(instances)
        cutting = self.links_cut > 0
        margin = reduction_margin(count)

        isolated: set[int] = set()  # Possibly stand-alone node ids
        back_links: dict[int, list[Link]] = defaultdict(list)
        sink.begin(count, cutting)
        with progress_tracker("Forming links", count, self.use_rich) as (
            progress,
            task,
        ):
            for i, inst in enumerate(instances):
                sid = ids[i]
                candidates = back_links.pop(i, [])
                for j in range(i + 1, count):
                    weight = self.source.similarity(inst, instances[j], self.jaccard)
                    if weight == 0:
                        isolated.add(ids[j])
                        continue
                    candidates.append(Link(ids[j], weight))
                    if cutting:
                        back_links[j].append(Link(sid, weight))

                self_link = None
                if self.weigh_node:
                    # Typically the self-weight is 1
                    weight = self.source.similarity(inst, inst, self.jaccard)
                    if weight != 0:
                        self_link = Link(sid, weight)
                    else:
                        isolated.add(sid)

                links = reduce_links(candidates, self.links_cut, margin, self_link)
                sink.add_links(sid, links)
                progress.advance(task)

        sink.add_isolated(isolated)
        sink.finish()

    def build(self) -> Graph:
        """Build the input graph for the clustering."""
        sink = GraphSink()
        self.emit(sink)
        logger.info(
            f"The input graph is formed: {sink.graph.node_count} nodes, "
            f"{sink.graph.link_count} links"
        )
        return sink.graph

    def save(self, path: str | Path) -> None:
        """Save the clustering input network to the specified file."""
        with open(path, "w", encoding="utf-8") as f:
            self.emit(NetworkWriter(f))
        logger.info(f"The network is saved to: {path}")
