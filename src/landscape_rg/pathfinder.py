from __future__ import annotations

import heapq
from dataclasses import dataclass
from typing import Optional, Union

import structlog

from .common import PathNotFoundError, PixelPath, PointType
from .grid import Grid, check_same_size

logger = structlog.get_logger()


@dataclass
class Node:
    # NOTE: 'x' and 'y' being properties would do more harm than good
    x: int
    y: int
    distance: float = float('inf')
    parent: Union[tuple[int, int], None] = None
    closed: bool = False


class Pathfinder:
    """A* over the 8-connected grid graph penalizing elevation change.

    Moving to an orthogonal neighbour costs 10, to a diagonal one 14, plus the absolute elevation
    difference times `slope_penalty`. Heuristic is the octile distance, which ignores slope, hence
    it is consistent as long as `slope_penalty` isn't negative.

    Ties are broken deterministically: lowest f-cost first, then lowest h-cost, then the node
    queued earliest.
    """

    orthogonal_cost = 10
    diagonal_cost = 14

    __neighbours = ((-1, -1, diagonal_cost), (0, -1, orthogonal_cost), (1, -1, diagonal_cost),
                    (-1, 0, orthogonal_cost), (1, 0, orthogonal_cost),
                    (-1, 1, diagonal_cost), (0, 1, orthogonal_cost), (1, 1, diagonal_cost))

    def __init__(self, graph: Grid, slope_penalty: float = 0., *,
                 obstacles: Optional[Grid] = None, obstacle_threshold: float = .5) -> None:
        if not isinstance(slope_penalty, (float, int)):
            raise TypeError("Argument 'slope_penalty' should be a number, not '%s'" %
                            type(slope_penalty).__name__)
        if slope_penalty < 0:
            raise ValueError("Argument 'slope_penalty' should not be negative")

        self._width, self._height = graph.size
        self._graph = graph.data.ravel().tolist()
        self._slope_penalty = slope_penalty
        if obstacles is not None:
            check_same_size(graph, obstacles)
            self._blocked = (obstacles.data >= obstacle_threshold).ravel().tolist()
        else:
            self._blocked = None

    @classmethod
    def octile(cls, a: PointType, b: PointType) -> float:
        d_x = abs(a[0] - b[0])
        d_y = abs(a[1] - b[1])
        return cls.diagonal_cost * min(d_x, d_y) + cls.orthogonal_cost * abs(d_x - d_y)

    def _check_endpoint(self, name: str, cell: PointType) -> None:
        x, y = cell
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise PathNotFoundError("%s %s is out of bounds of %dx%d grid" %
                                    (name, cell, self._width, self._height))
        if self._blocked is not None and self._blocked[x + self._width * y]:
            raise PathNotFoundError("%s %s is blocked" % (name, cell))

    def find_path(self, start: PointType, end: PointType) -> PixelPath:
        """Finds the cheapest path between two cells.

        :param start: It is the source cell.
        :type start: :data:`.PointType`
        :param end: It is the target cell.
        :type end: :data:`.PointType`
        :return: Cost and cells of the path, both endpoints included.
        :rtype: :class:`.PixelPath`
        :raises: :exc:`.PathNotFoundError` if an endpoint is out of bounds (or blocked), or the
            frontier is exhausted before reaching `end`.
        """

        start = tuple(start)
        end = tuple(end)
        self._check_endpoint('Start', start)
        self._check_endpoint('End', end)

        nodes = {start: Node(*start, distance=0.)}
        counter = 0
        h_start = self.octile(start, end)
        frontier = [(h_start, h_start, counter, start)]
        expansions = 0

        while frontier:
            _f, _h, _, current = heapq.heappop(frontier)
            node = nodes[current]
            if node.closed:
                continue
            node.closed = True
            expansions += 1

            if current == end:
                path = PixelPath(node.distance, self.backtrack(nodes, end))
                logger.info("Path found", start=start, end=end, cost=path.cost,
                            length=len(path), expansions=expansions)
                return path

            u_value = self._graph[node.x + self._width * node.y]
            for d_x, d_y, h_cost in self.__neighbours:
                n_x, n_y = node.x + d_x, node.y + d_y
                if not (0 <= n_x < self._width and 0 <= n_y < self._height):
                    continue
                index = n_x + self._width * n_y
                if self._blocked is not None and self._blocked[index]:
                    continue
                neighbour = nodes.get((n_x, n_y))
                if neighbour is None:
                    neighbour = nodes[n_x, n_y] = Node(n_x, n_y)
                elif neighbour.closed:
                    continue
                v_cost = abs(u_value - self._graph[index]) * self._slope_penalty
                alt = node.distance + h_cost + v_cost
                if alt < neighbour.distance:
                    neighbour.distance = alt
                    neighbour.parent = current
                    h_value = self.octile((n_x, n_y), end)
                    counter += 1
                    heapq.heappush(frontier, (alt + h_value, h_value, counter, (n_x, n_y)))

        raise PathNotFoundError("Couldn't be found a path from %s to %s" % (start, end))

    @staticmethod
    def backtrack(predecessors: dict[tuple[int, int], Node],
                  current: tuple[int, int]) -> list[tuple[int, int]]:
        total_path = [current]
        while predecessors[current].parent is not None:
            current = predecessors[current].parent
            total_path.append(current)
        total_path.reverse()
        return total_path


def find_path(grid: Grid, start: PointType, end: PointType, slope_penalty: float = 0., *,
              obstacles: Optional[Grid] = None) -> PixelPath:
    """Shorthand for ``Pathfinder(grid, slope_penalty, obstacles=obstacles).find_path(...)``."""

    return Pathfinder(grid, slope_penalty, obstacles=obstacles).find_path(start, end)
