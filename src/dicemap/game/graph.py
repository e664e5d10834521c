from __future__ import annotations

from collections import deque
from typing import List, Set, Tuple

import numpy as np

from dicemap.errors import InvalidConfiguration, OutOfRange


class Graph:
    """Undirected adjacency-matrix graph over a fixed number of vertices.

    Vertices can be deactivated. A deactivated vertex loses its incident
    edges and is skipped by every adjacency and connectivity query.
    """

    def __init__(self, num_vertices: int) -> None:
        if num_vertices <= 0:
            raise InvalidConfiguration(f"Graph needs at least one vertex, got {num_vertices}.")
        self.num_vertices = num_vertices
        self.adjacency = np.zeros((num_vertices, num_vertices), dtype=bool)
        self._inactive: Set[int] = set()

    def add_edge(self, source: int, destination: int) -> None:
        self._validate(source)
        self._validate(destination)
        if source == destination:
            return
        self.adjacency[source, destination] = True
        self.adjacency[destination, source] = True

    def remove_edge(self, source: int, destination: int) -> None:
        self._validate(source)
        self._validate(destination)
        self.adjacency[source, destination] = False
        self.adjacency[destination, source] = False

    def is_edge(self, source: int, destination: int) -> bool:
        self._validate(source)
        self._validate(destination)
        if source in self._inactive or destination in self._inactive:
            return False
        return bool(self.adjacency[source, destination])

    def neighbors(self, vertex: int) -> List[int]:
        self._validate(vertex)
        if vertex in self._inactive:
            return []
        return [
            int(i)
            for i in np.flatnonzero(self.adjacency[vertex])
            if int(i) not in self._inactive
        ]

    def deactivate(self, vertex: int) -> None:
        self._validate(vertex)
        self._inactive.add(vertex)
        self.adjacency[vertex, :] = False
        self.adjacency[:, vertex] = False

    def degree(self, vertex: int) -> int:
        return len(self.neighbors(vertex))

    def is_active(self, vertex: int) -> bool:
        self._validate(vertex)
        return vertex not in self._inactive

    def active_vertices(self) -> List[int]:
        return [v for v in range(self.num_vertices) if v not in self._inactive]

    def inactive_vertices(self) -> List[int]:
        return sorted(self._inactive)

    def edges(self) -> List[Tuple[int, int]]:
        return [
            (u, v)
            for u in self.active_vertices()
            for v in self.neighbors(u)
            if u < v
        ]

    def edge_count(self) -> int:
        return len(self.edges())

    def reachable(self, start: int) -> Set[int]:
        """Return the active vertices reachable from ``start`` by BFS."""
        self._validate(start)
        if start in self._inactive:
            return set()
        visited = {start}
        queue = deque([start])
        while queue:
            current = queue.popleft()
            for neighbor in self.neighbors(current):
                if neighbor not in visited:
                    visited.add(neighbor)
                    queue.append(neighbor)
        return visited

    def is_connected(self) -> bool:
        active = self.active_vertices()
        if not active:
            return True
        return len(self.reachable(active[0])) == len(active)

    def _validate(self, vertex: int) -> None:
        if vertex < 0 or vertex >= self.num_vertices:
            raise OutOfRange(
                f"Vertex {vertex} out of range 0..{self.num_vertices - 1}."
            )
