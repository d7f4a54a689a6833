"""
Sinks consuming the links formed by the graph builder.

The same traversal either materializes the graph in memory or streams the
network to a file in the .rcg format:

    /Graph weighted:1 validated:1
    /Nodes <count>
    /Edges
    <id>> <target>:<weight> ...
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import TextIO

from .models import Graph, Link

DUPLICATES_NOTE = "# Note: duplicated edges may exist and should be omitted\n"


def unsigned_id(node_id: int) -> int:
    """Node id as an unsigned 32-bit value, negative ids mark filtered nodes."""
    return node_id & 0xFFFFFFFF


class LinkSink(ABC):
    """Consumer of the per-source links formed by the graph builder."""

    def begin(self, node_count: int, cutting: bool) -> None:
        """Start the traversal of node_count instances."""

    @abstractmethod
    def add_links(self, source_id: int, links: list[Link]) -> None:
        """Accept the final links of the source node, possibly empty."""

    @abstractmethod
    def add_isolated(self, node_ids: Iterable[int]) -> None:
        """Accept the nodes that might lack any links."""

    def finish(self) -> None:
        """Complete the traversal."""


class GraphSink(LinkSink):
    """Materializes the links into an in-memory graph."""

    def __init__(self):
        self.graph = Graph()

    def add_links(self, source_id: int, links: list[Link]) -> None:
        self.graph.add_node_and_links(source_id, links)

    def add_isolated(self, node_ids: Iterable[int]) -> None:
        self.graph.add_nodes(node_ids)


class NetworkWriter(LinkSink):
    """Streams the links to a text stream in the .rcg format.

    Each source node is written on its own line, so the stand-alone nodes
    are already present in the output and are not repeated.
    """

    def __init__(self, stream: TextIO):
        self.stream = stream

    def begin(self, node_count: int, cutting: bool) -> None:
        # The starting id is not specified since the filtered ids are inverted
        self.stream.write(
            f"/Graph weighted:1 validated:1\n/Nodes {node_count}\n/Edges\n"
        )
        if cutting:
            self.stream.write(DUPLICATES_NOTE)

    def add_links(self, source_id: int, links: list[Link]) -> None:
        line = f"{unsigned_id(source_id)}>"
        if links:
            line += "".join(
                f" {unsigned_id(ln.target_id)}:{ln.weight}" for ln in links
            )
        self.stream.write(line + "\n")

    def add_isolated(self, node_ids: Iterable[int]) -> None:
        pass

    def finish(self) -> None:
        self.stream.flush()
