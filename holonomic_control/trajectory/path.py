from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Iterator, Tuple

from holonomic_control.common import Pose2d, Vertex

if TYPE_CHECKING:
    from .config import TrajectoryConfig
    from .trajectory import Trajectory


@dataclass(frozen=True)
class Path:
    """Ordered planner waypoints from start to goal. Never mutated after creation."""

    vertices: Tuple[Vertex, ...]

    def __post_init__(self) -> None:
        vertices = tuple(self.vertices)
        if not vertices:
            raise ValueError("Path must contain at least one vertex.")
        if not all(isinstance(vertex, Vertex) for vertex in vertices):
            raise TypeError("Path vertices must be Vertex instances.")
        object.__setattr__(self, "vertices", vertices)

    @classmethod
    def between(
        cls, start: Pose2d, goal: Pose2d, waypoints: Iterable[Vertex] = ()
    ) -> Path:
        return cls(
            (Vertex.from_pose(start), *tuple(waypoints), Vertex.from_pose(goal))
        )

    def __len__(self) -> int:
        return len(self.vertices)

    def __iter__(self) -> Iterator[Vertex]:
        return iter(self.vertices)

    @property
    def start(self) -> Vertex:
        return self.vertices[0]

    @property
    def goal(self) -> Vertex:
        return self.vertices[-1]

    @property
    def waypoints(self) -> Tuple[Vertex, ...]:
        return self.vertices[1:-1]

    def segment_lengths(self) -> list[float]:
        return [a.distance_to(b) for a, b in zip(self.vertices, self.vertices[1:])]

    @property
    def length(self) -> float:
        return float(sum(self.segment_lengths()))

    def densify(self, max_spacing: float) -> Path:
        """Insert evenly spaced points so no segment is longer than ``max_spacing``.

        Every original vertex is kept; zero-length segments are collapsed.
        """
        if max_spacing <= 0.0:
            raise ValueError("max_spacing must be positive.")
        points: list[Vertex] = [self.vertices[0]]
        for a, b in zip(self.vertices, self.vertices[1:]):
            length = a.distance_to(b)
            if length <= 1e-9:
                continue
            count = max(1, math.ceil(length / max_spacing))
            for i in range(1, count + 1):
                alpha = i / count
                points.append(Vertex(a.x + alpha * (b.x - a.x), a.y + alpha * (b.y - a.y)))
        return Path(tuple(points))

    def as_trajectory(self, config: TrajectoryConfig) -> Trajectory:
        from .parameterizer import parameterize

        return parameterize(self, config)
