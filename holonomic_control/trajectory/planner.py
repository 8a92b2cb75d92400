"""Boundary to the external path planner.

The obstacle-aware search itself lives outside this package. Planners hand
back either a :class:`Path` or a :class:`PlanningFailure` value;
infeasibility is an expected outcome, not an exception.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Tuple

import numpy as np

from holonomic_control.common import Pose2d, Vertex

from .path import Path


@dataclass(frozen=True)
class Footprint:
    length_m: float
    width_m: float

    def __post_init__(self) -> None:
        if self.length_m <= 0.0 or self.width_m <= 0.0:
            raise ValueError("Footprint dimensions must be positive.")

    @property
    def inflation_radius_m(self) -> float:
        return 0.5 * math.hypot(self.length_m, self.width_m)


@dataclass(frozen=True)
class Obstacle:
    """Simple polygon given by its vertices in order."""

    vertices: Tuple[Vertex, ...]

    def __post_init__(self) -> None:
        vertices = tuple(self.vertices)
        if len(vertices) < 3:
            raise ValueError("Obstacle polygon needs at least three vertices.")
        object.__setattr__(self, "vertices", vertices)

    @classmethod
    def rectangle(cls, x_min: float, y_min: float, x_max: float, y_max: float) -> Obstacle:
        return cls(
            (
                Vertex(x_min, y_min),
                Vertex(x_max, y_min),
                Vertex(x_max, y_max),
                Vertex(x_min, y_max),
            )
        )

    def edges(self) -> list[tuple[np.ndarray, np.ndarray]]:
        points = [vertex.as_array() for vertex in self.vertices]
        return list(zip(points, points[1:] + points[:1]))

    def contains(self, point: np.ndarray) -> bool:
        x, y = float(point[0]), float(point[1])
        inside = False
        for a, b in self.edges():
            if (a[1] > y) != (b[1] > y):
                x_cross = a[0] + (y - a[1]) * (b[0] - a[0]) / (b[1] - a[1])
                if x < x_cross:
                    inside = not inside
        return inside

    def clearance(self, start: np.ndarray, end: np.ndarray) -> float:
        """Smallest distance between the segment start-end and this polygon."""
        if self.contains(start) or self.contains(end):
            return 0.0
        return min(_segment_distance(start, end, a, b) for a, b in self.edges())


@dataclass(frozen=True)
class FieldMap:
    width_m: float
    height_m: float
    obstacles: Tuple[Obstacle, ...] = ()

    def __post_init__(self) -> None:
        if self.width_m <= 0.0 or self.height_m <= 0.0:
            raise ValueError("Field dimensions must be positive.")
        object.__setattr__(self, "obstacles", tuple(self.obstacles))

    def contains(self, point: np.ndarray, margin: float = 0.0) -> bool:
        x, y = float(point[0]), float(point[1])
        return (
            margin <= x <= self.width_m - margin
            and margin <= y <= self.height_m - margin
        )


class PlanningError(Enum):
    NO_PATH = "no_path"
    START_BLOCKED = "start_blocked"
    GOAL_BLOCKED = "goal_blocked"
    OUT_OF_BOUNDS = "out_of_bounds"


@dataclass(frozen=True)
class PlanningFailure:
    error: PlanningError
    message: str

    def __str__(self) -> str:
        return f"{self.error.value}: {self.message}"


class Planner(Protocol):
    def plan(
        self,
        start: Pose2d,
        goal: Pose2d,
        footprint: Footprint,
        field_map: FieldMap,
    ) -> Path | PlanningFailure: ...


class StraightLinePlanner:
    """Connect start and goal directly when the inflated footprint clears every obstacle.

    This is a feasibility check, not a search: any blocked segment is reported
    as ``NO_PATH``.
    """

    def plan(
        self,
        start: Pose2d,
        goal: Pose2d,
        footprint: Footprint,
        field_map: FieldMap,
    ) -> Path | PlanningFailure:
        radius = footprint.inflation_radius_m
        start_xy = start.translation
        goal_xy = goal.translation

        # Start is checked without the footprint margin.
        if not field_map.contains(start_xy):
            return PlanningFailure(
                PlanningError.OUT_OF_BOUNDS,
                f"Start ({start.x:.2f}, {start.y:.2f}) is outside the field.",
            )
        if not field_map.contains(goal_xy, margin=radius):
            return PlanningFailure(
                PlanningError.OUT_OF_BOUNDS,
                f"Goal ({goal.x:.2f}, {goal.y:.2f}) is outside the field for this footprint.",
            )

        for index, obstacle in enumerate(field_map.obstacles):
            if obstacle.clearance(start_xy, start_xy) < radius:
                return PlanningFailure(
                    PlanningError.START_BLOCKED,
                    f"Start pose overlaps obstacle {index}.",
                )
            if obstacle.clearance(goal_xy, goal_xy) < radius:
                return PlanningFailure(
                    PlanningError.GOAL_BLOCKED,
                    f"Goal pose overlaps obstacle {index}.",
                )
            if obstacle.clearance(start_xy, goal_xy) < radius:
                return PlanningFailure(
                    PlanningError.NO_PATH,
                    f"Direct segment intersects obstacle {index}.",
                )

        return Path.between(start, goal)


def _point_segment_distance(point: np.ndarray, a: np.ndarray, b: np.ndarray) -> float:
    ab = b - a
    denom = float(np.dot(ab, ab))
    if denom <= 0.0:
        return float(np.linalg.norm(point - a))
    t = max(0.0, min(1.0, float(np.dot(point - a, ab)) / denom))
    return float(np.linalg.norm(point - (a + t * ab)))


def _cross(o: np.ndarray, a: np.ndarray, b: np.ndarray) -> float:
    return float((a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0]))


def _segments_intersect(p1: np.ndarray, p2: np.ndarray, q1: np.ndarray, q2: np.ndarray) -> bool:
    d1 = _cross(q1, q2, p1)
    d2 = _cross(q1, q2, p2)
    d3 = _cross(p1, p2, q1)
    d4 = _cross(p1, p2, q2)
    return (d1 * d2 < 0.0) and (d3 * d4 < 0.0)


def _segment_distance(p1: np.ndarray, p2: np.ndarray, q1: np.ndarray, q2: np.ndarray) -> float:
    if _segments_intersect(p1, p2, q1, q2):
        return 0.0
    return min(
        _point_segment_distance(p1, q1, q2),
        _point_segment_distance(p2, q1, q2),
        _point_segment_distance(q1, p1, p2),
        _point_segment_distance(q2, p1, p2),
    )
