from .config import SimulatorConfig
from .simulator import HolonomicSimulator, SimulationStep
from .states import ChassisState
from .telemetry import TelemetryLogger

__all__ = [
    "ChassisState",
    "HolonomicSimulator",
    "SimulationStep",
    "SimulatorConfig",
    "TelemetryLogger",
]
