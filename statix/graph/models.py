"""
Data models of the clustering input graph.

- Link: Weighted link to the target instance
- Graph: Instance ids with their retained links
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Link:
    """Weighted link to the target instance."""

    target_id: int
    weight: float

    def __post_init__(self):
        """Validate the link weight, zero similarity means no link."""
        if not self.weight > 0:
            raise ValueError(
                f"The link weight to #{self.target_id} should be positive: {self.weight}"
            )


@dataclass
class Graph:
    """Weighted input graph for the clustering.

    Each node owns the links emitted for it as a source, so without the links
    cutting every edge is stored once, by the earlier enumerated instance.
    """

    nodes: dict[int, list[Link]] = field(default_factory=dict)

    def add_node_and_links(self, node_id: int, links: Iterable[Link]) -> None:
        """Add the node with its outgoing links, extending the existing ones."""
        self.nodes.setdefault(node_id, []).extend(links)

    def add_nodes(self, node_ids: Iterable[int]) -> None:
        """Add nodes without links, the existing nodes are kept as is."""
        for node_id in node_ids:
            self.nodes.setdefault(node_id, [])

    def links(self, node_id: int) -> list[Link]:
        """Links of the node."""
        return self.nodes[node_id]

    def edges(self) -> Iterator[tuple[int, int, float]]:
        """Iterate over (source, target, weight) of all the links."""
        for node_id, links in self.nodes.items():
            for link in links:
                yield node_id, link.target_id, link.weight

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def link_count(self) -> int:
        return sum(len(links) for links in self.nodes.values())

    def __contains__(self, node_id: int) -> bool:
        return node_id in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)
