# Exp_AutoIK/developer/diagnostics.py
"""
Structured diagnostics for the IK builder.

The builder never prints. It emits events (plain dataclasses carrying the
raw numbers) to observers. log_event() is the default observer and turns an
event into a dev_logger line; tests and tools can register their own.
"""

from dataclasses import dataclass, field, asdict
from typing import Callable, Dict, List, Optional, Tuple

from .dev_logger import log_ik


@dataclass(frozen=True)
class DiagnosticEvent:
    """Base event. Subclasses fill category and level."""
    category: str = field(default="AUTO-IK", init=False)
    level: str = field(default="INFO", init=False)

    def message(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['event'] = self.__class__.__name__
        return data


@dataclass(frozen=True)
class MappingEvent(DiagnosticEvent):
    """Result of role mapping."""
    complete: bool = False
    platform_name: Optional[str] = None
    bones_mapped: int = 0
    bone_count: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'category', 'RIG-MAP')
        object.__setattr__(self, 'level', 'INFO' if self.complete else 'ERROR')

    def message(self) -> str:
        if not self.complete:
            return "Bone mapping incomplete - not enough bones found"
        platform = self.platform_name or "Unknown (fuzzy matching)"
        return f"Platform detected: {platform}, bones mapped: {self.bones_mapped}"


@dataclass(frozen=True)
class AxisDetectionEvent(DiagnosticEvent):
    """Axis detected for one constrained joint."""
    joint: str = ""                     # "leftKnee", "rightElbow", ...
    role: str = ""                      # "leftLowerLeg", ...
    bone_name: str = ""
    axis: str = ""                      # "x", "y", "z"
    direction: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    confidence: float = 0.0
    name_hint: Optional[str] = None     # classify_biomechanical(bone_name)

    def __post_init__(self):
        object.__setattr__(self, 'category', 'AXIS')

    @property
    def confidence_pct(self) -> int:
        return int(round(self.confidence * 100))

    def message(self) -> str:
        return (f"{self.joint}: {self.axis.upper()}-axis "
                f"({self.confidence_pct}% confidence) bone={self.bone_name}")


@dataclass(frozen=True)
class ConstraintEvent(DiagnosticEvent):
    """Constraint synthesis summary for a build."""
    created: int = 0
    joints: Tuple[str, ...] = ()
    unconstrained: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'category', 'CONSTRAINT')

    def message(self) -> str:
        msg = f"Constraints created: {self.created}"
        if self.unconstrained:
            msg += f" (unconstrained: {', '.join(self.unconstrained)})"
        return msg


@dataclass(frozen=True)
class LimbSkippedEvent(DiagnosticEvent):
    """A limb chain was not built."""
    limb: str = ""                      # "leftLeg", "rightArm", ...
    missing: Tuple[str, ...] = ()       # missing role names

    def __post_init__(self):
        object.__setattr__(self, 'category', 'IK-CHAIN')
        object.__setattr__(self, 'level', 'WARNING')

    def message(self) -> str:
        return f"Incomplete {self.limb} - skipping IK chain (missing: {', '.join(self.missing)})"


@dataclass(frozen=True)
class BuildSummaryEvent(DiagnosticEvent):
    """Final chain count of a build."""
    chain_count: int = 0
    chains: Tuple[str, ...] = ()

    def message(self) -> str:
        return f"Built {self.chain_count} IK chains with auto-constraints"


@dataclass(frozen=True)
class WarningEvent(DiagnosticEvent):
    """Non-fatal problem (unknown joint name, malformed constraint, ...)."""
    source: str = "AUTO-IK"
    text: str = ""

    def __post_init__(self):
        object.__setattr__(self, 'category', self.source)
        object.__setattr__(self, 'level', 'WARNING')

    def message(self) -> str:
        return self.text


Observer = Callable[[DiagnosticEvent], None]


def log_event(event: DiagnosticEvent) -> None:
    """Default observer: forward an event to the dev logger."""
    log_ik(event.category, event.message(), level=event.level)


class DiagnosticsRecorder:
    """
    Collects events for one build and fans them out to observers.

    Usage:
        recorder = DiagnosticsRecorder([log_event], verbose=True)
        recorder.emit(MappingEvent(complete=True, bones_mapped=20))
        recorder.events  # every event, regardless of verbosity
    """

    __slots__ = ('events', '_observers', '_verbose')

    def __init__(self, observers: Optional[List[Observer]] = None, verbose: bool = True):
        self.events: List[DiagnosticEvent] = []
        self._observers = list(observers or [])
        self._verbose = verbose

    def emit(self, event: DiagnosticEvent) -> None:
        """Record an event; forward it unless it is INFO and verbosity is off."""
        self.events.append(event)
        if event.level == "INFO" and not self._verbose:
            return
        for observer in self._observers:
            observer(event)

    def warn(self, source: str, text: str) -> None:
        self.emit(WarningEvent(source=source, text=text))
