from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from holonomic_control.common import Pose2d, PoseSource

from .config import TrajectoryConfig
from .parameterizer import TrajectoryGenerationError, parameterize
from .path import Path
from .planner import FieldMap, Footprint, Planner, PlanningError, PlanningFailure
from .trajectory import Trajectory

logger = logging.getLogger(__name__)


class GenerationStatus(Enum):
    GENERATED = "generated"
    CACHED = "cached"
    PLANNING_FAILED = "planning_failed"
    PARAMETERIZATION_FAILED = "parameterization_failed"


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of a generate call.

    ``trajectory`` is always the generator's current trajectory after the
    call: the new one on success, the retained one on failure (``None`` if
    nothing has been generated yet).
    """

    status: GenerationStatus
    trajectory: Trajectory | None
    failure: PlanningFailure | None = None

    @property
    def succeeded(self) -> bool:
        return self.status in (GenerationStatus.GENERATED, GenerationStatus.CACHED)

    @property
    def replanned(self) -> bool:
        return self.status is GenerationStatus.GENERATED


class TrajectoryGenerator:
    """Plan and time-parameterize a trajectory to a target pose, caching the last one."""

    def __init__(
        self,
        planner: Planner,
        pose_source: PoseSource,
        config: TrajectoryConfig,
        footprint: Footprint,
        field_map: FieldMap,
        *,
        translation_tolerance_m: float = 1e-3,
        heading_tolerance_rad: float = 1e-3,
    ):
        if translation_tolerance_m < 0.0 or heading_tolerance_rad < 0.0:
            raise ValueError("Target comparison tolerances must be non-negative.")
        self._planner = planner
        self._pose_source = pose_source
        self._config = config
        self._footprint = footprint
        self._field_map = field_map
        self._translation_tolerance_m = translation_tolerance_m
        self._heading_tolerance_rad = heading_tolerance_rad

        self._path: Path | None = None
        self._trajectory: Trajectory | None = None
        self._target_pose: Pose2d | None = None
        self._planner_calls = 0

    @property
    def trajectory(self) -> Trajectory | None:
        return self._trajectory

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def target_pose(self) -> Pose2d | None:
        return self._target_pose

    @property
    def planner_calls(self) -> int:
        return self._planner_calls

    def needs_replan(self, target_pose: Pose2d) -> bool:
        if self._trajectory is None or self._target_pose is None:
            return True
        return not self._target_pose.is_close(
            target_pose,
            translation_tolerance=self._translation_tolerance_m,
            heading_tolerance=self._heading_tolerance_rad,
        )

    def invalidate(self) -> None:
        """Force the next generate call to replan even if the target is unchanged."""
        self._target_pose = None

    def generate_to(self, target_pose: Pose2d) -> GenerationResult:
        return self.generate(self._pose_source.get_current_pose(), target_pose)

    def generate(self, current_pose: Pose2d, target_pose: Pose2d) -> GenerationResult:
        if not self.needs_replan(target_pose):
            logger.debug("Target %s unchanged; reusing cached trajectory.", target_pose)
            return GenerationResult(GenerationStatus.CACHED, self._trajectory)

        self._planner_calls += 1
        outcome = self._planner.plan(
            current_pose, target_pose, self._footprint, self._field_map
        )
        if isinstance(outcome, PlanningFailure):
            logger.warning(
                "Planning from %s to %s failed (%s); keeping previous trajectory.",
                current_pose,
                target_pose,
                outcome,
            )
            return GenerationResult(
                GenerationStatus.PLANNING_FAILED, self._trajectory, outcome
            )

        try:
            trajectory = parameterize(outcome, self._config)
        except TrajectoryGenerationError as exc:
            logger.warning(
                "Could not parameterize path to %s (%s); keeping previous trajectory.",
                target_pose,
                exc,
            )
            failure = PlanningFailure(PlanningError.NO_PATH, str(exc))
            return GenerationResult(
                GenerationStatus.PARAMETERIZATION_FAILED, self._trajectory, failure
            )

        self._path = outcome
        self._trajectory = trajectory
        self._target_pose = target_pose
        logger.info(
            "Generated trajectory to %s: %d vertices, %.2f m, %.2f s.",
            target_pose,
            len(outcome),
            outcome.length,
            trajectory.total_duration_s,
        )
        return GenerationResult(GenerationStatus.GENERATED, trajectory)
