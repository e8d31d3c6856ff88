"""pyhoming - Camera-guided homing of a wheeled vehicle onto a colored target."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyhoming")
except PackageNotFoundError:
    __version__ = "0+local"
from pyhoming.config import NavigatorConfig
from pyhoming.exceptions import (
    ActuationError,
    AngleOutOfRange,
    CollaboratorError,
    DegenerateGeometryError,
    HomingConfigError,
    HomingError,
    HomingTransportError,
    PerceptionError,
)
from pyhoming.hardware import BridgeCamera, BridgeMotor, BridgeWheels, DriveActuator, SteerActuator
from pyhoming.heading import estimate_orientation
from pyhoming.models import (
    Angle,
    Color,
    Direction,
    Hint,
    Mode,
    Position,
    Region,
    Snapshot,
    StepOutcome,
    StepReport,
    TeamColors,
    Vector,
    angle_between,
    vector_from,
)
from pyhoming.navigator import NavigationStateMachine, steering_for, transition
from pyhoming.perception import Detector, capture_snapshot
from pyhoming.routines import ApproachRoutine, IdleRoutine, load_routine

__all__ = [
    "__version__",
    "ActuationError",
    "Angle",
    "AngleOutOfRange",
    "ApproachRoutine",
    "BridgeCamera",
    "BridgeMotor",
    "BridgeWheels",
    "CollaboratorError",
    "Color",
    "DegenerateGeometryError",
    "Detector",
    "Direction",
    "DriveActuator",
    "Hint",
    "HomingConfigError",
    "HomingError",
    "HomingTransportError",
    "IdleRoutine",
    "Mode",
    "NavigationStateMachine",
    "NavigatorConfig",
    "PerceptionError",
    "Position",
    "Region",
    "Snapshot",
    "SteerActuator",
    "StepOutcome",
    "StepReport",
    "TeamColors",
    "Vector",
    "angle_between",
    "capture_snapshot",
    "estimate_orientation",
    "load_routine",
    "steering_for",
    "transition",
    "vector_from",
]
