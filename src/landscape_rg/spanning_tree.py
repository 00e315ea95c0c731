"""Minimum spanning tree and flow accumulation over sampled nodes"""

from __future__ import annotations

from collections import deque
from math import hypot
from typing import Sequence

from .common import GraphEdge, GraphNode


class DisjointSet:
    """Union-find with path compression and union by rank."""

    def __init__(self, count: int) -> None:
        self._parent = list(range(count))
        self._rank = [0] * count

    def find(self, item: int) -> int:
        root = item
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[item] != root:
            self._parent[item], item = root, self._parent[item]
        return root

    def union(self, a: int, b: int) -> bool:
        """Merges the sets of `a` and `b`, returns :data:`False` if they were already joined."""

        root_a, root_b = self.find(a), self.find(b)
        if root_a == root_b:
            return False
        if self._rank[root_a] < self._rank[root_b]:
            root_a, root_b = root_b, root_a
        self._parent[root_b] = root_a
        if self._rank[root_a] == self._rank[root_b]:
            self._rank[root_a] += 1
        return True


def complete_graph(nodes: Sequence[GraphNode]) -> list[GraphEdge]:
    """Lists every pair of nodes weighted by Euclidean distance.

    :param nodes: It is a list of nodes.
    :type nodes: :class:`list` [:class:`.GraphNode`, ...]
    :return: Edges sorted ascending by weight, ties broken by node indices.
    :rtype: :class:`list` [:class:`.GraphEdge`, ...]
    """

    edges = [GraphEdge(i, j, hypot(nodes[i].x - nodes[j].x, nodes[i].y - nodes[j].y))
             for i in range(len(nodes)) for j in range(i + 1, len(nodes))]
    edges.sort(key=lambda edge: (edge.weight, edge.u, edge.v))
    return edges


def kruskal(count: int, edges: Sequence[GraphEdge]) -> list[GraphEdge]:
    """Selects cheapest edges until all nodes are connected.

    :param count: It is the number of nodes.
    :type count: :class:`int`
    :param edges: It is a list of edges sorted ascending by weight.
    :type edges: :class:`list` [:class:`.GraphEdge`, ...]
    :return: Edges of a minimum spanning forest, ``count - 1`` of them if the graph is connected.
    :rtype: :class:`list` [:class:`.GraphEdge`, ...]
    """

    components = DisjointSet(count)
    result = []
    for edge in edges:
        if components.union(edge.u, edge.v):
            result.append(edge)
            if len(result) == count - 1:
                break
    return result


def minimum_spanning_tree(nodes: Sequence[GraphNode]) -> list[GraphEdge]:
    return kruskal(len(nodes), complete_graph(nodes))


def flow_accumulation(count: int, edges: Sequence[GraphEdge], root: int
                      ) -> tuple[list[int], list[int]]:
    """Accumulates flow from leaves toward `root`.

    Breadth-first traversal from `root` gives the parent of each node, then in reverse traversal
    order ``flow[node] = 1 + sum(flow[child])``, i.e. the size of the subtree of each node.

    :param count: It is the number of nodes.
    :type count: :class:`int`
    :param edges: It is a list of tree edges.
    :type edges: :class:`list` [:class:`.GraphEdge`, ...]
    :param root: It is the index of the outlet.
    :type root: :class:`int`
    :return: Parent of each node (``-1`` for the root and for unreachable nodes) and flow of
        each node (``0`` for unreachable nodes).
    :rtype: :class:`tuple` [:class:`list` [:class:`int`, ...], :class:`list` [:class:`int`, ...]]
    """

    adjacency = {i: [] for i in range(count)}
    for edge in edges:
        adjacency[edge.u].append(edge.v)
        adjacency[edge.v].append(edge.u)

    parent = [-1] * count
    visited = [False] * count
    visited[root] = True
    order = [root]
    queue = deque(order)
    while queue:
        u = queue.popleft()
        for v in adjacency[u]:
            if not visited[v]:
                visited[v] = True
                parent[v] = u
                order.append(v)
                queue.append(v)

    flow = [0] * count
    for u in reversed(order):
        flow[u] += 1
        if parent[u] != -1:
            flow[parent[u]] += flow[u]
    return parent, flow


def downstream(edge: GraphEdge, parent: Sequence[int]) -> int:
    """It is the endpoint of `edge` nearer to the root."""

    return edge.v if parent[edge.u] == edge.v else edge.u
