# Exp_AutoIK/engine/auto_builder.py
"""
AutoConstraintBuilder - automatic IK configuration.

ONE CALL from a bone list to a complete IK configuration:

    builder = AutoConstraintBuilder(mapper, detector)
    chains = builder.build_ik_config(bones)

Pipeline (single pass, no retries):
1. Role mapping       - incomplete mapping aborts the build (empty result)
2. Index resolution   - bone uid -> skeleton index
3. Joint constraints  - axis detection + biomechanics for knees/elbows
4. Target slots       - four indices after the skeleton, plus the synthetic
                        target bones appended to a COPY of the bone list
5. Limb chains        - left leg, right leg, left arm, right arm; a limb with
                        missing bones is skipped, the others still build
6. Result

Nothing is printed. Diagnostics are events (see developer/diagnostics.py):
all of them land in IKBuildResult.events, observers get warnings/errors
always and info events only with log_detection on.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ..autoik_config import BuildOptions, DEFAULT_OPTIONS
from ..developer.diagnostics import (
    AxisDetectionEvent,
    BuildSummaryEvent,
    ConstraintEvent,
    DiagnosticEvent,
    DiagnosticsRecorder,
    LimbSkippedEvent,
    MappingEvent,
    Observer,
    log_event,
)
from .biomechanics import BiomechanicalTable, default_table
from .constraints import ConstraintDescriptor, create_from_biomechanics
from .ik_chains import (
    ChainDescriptor,
    TargetSlot,
    ARM_CHAINS,
    CONSTRAINED_JOINTS,
    LEG_CHAINS,
    LIMB_ORDER,
    build_arm_chain,
    build_leg_chain,
    create_target_bones,
    missing_roles,
    reserve_target_slots,
)
from .ik_math import rad_to_deg
from .joint_classifier import classify_biomechanical
from .skeleton import (
    AxisDetector,
    BoneMapping,
    BoneRef,
    MalformedCollaboratorResponse,
    RoleMapper,
    build_bone_index,
    coerce_axis_result,
    coerce_mapping,
)


# =============================================================================
# RESULT
# =============================================================================

@dataclass
class IKBuildResult:
    """
    Everything one build produced.

    chains index into `bones`, which is the input bone list followed by the
    synthetic target bones (so every chain target is a valid index).
    """
    chains: List[ChainDescriptor] = field(default_factory=list)
    constraints: Dict[str, Optional[ConstraintDescriptor]] = field(default_factory=dict)
    targets: Dict[str, TargetSlot] = field(default_factory=dict)
    bones: List[BoneRef] = field(default_factory=list)
    platform_name: Optional[str] = None
    mapping_complete: bool = False
    events: List[DiagnosticEvent] = field(default_factory=list)

    @property
    def skipped_limbs(self) -> List[str]:
        return [e.limb for e in self.events if isinstance(e, LimbSkippedEvent)]

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data form. Bones are listed by name."""
        return {
            'platformName': self.platform_name,
            'mappingComplete': self.mapping_complete,
            'chains': [c.to_dict() for c in self.chains],
            'constraints': {
                k: (c.to_dict() if c is not None else None) for k, c in self.constraints.items()
            },
            'targets': {k: t.to_dict() for k, t in self.targets.items()},
            'bones': [b.name for b in self.bones],
        }


# =============================================================================
# BUILDER
# =============================================================================

class AutoConstraintBuilder:
    """
    Builds IK chains with auto-detected constraints.

    Args:
        mapper: RoleMapper (bones -> BoneMapping)
        detector: AxisDetector (bone -> AxisResult)
        table: Biomechanical table (default table if None)
        observers: Diagnostic observers (default: [log_event])
        options: Initial BuildOptions
    """

    def __init__(
        self,
        mapper: RoleMapper,
        detector: AxisDetector,
        table: Optional[BiomechanicalTable] = None,
        observers: Optional[List[Observer]] = None,
        options: BuildOptions = DEFAULT_OPTIONS
    ):
        self.mapper = mapper
        self.detector = detector
        self.table = table if table is not None else default_table()
        self.observers: List[Observer] = list(observers) if observers is not None else [log_event]
        self.options = options

    def set_options(self, options: Optional[Dict[str, Any]] = None, **overrides) -> None:
        """
        Merge a partial configuration into the builder's options.

        Keys: enable_legs, enable_arms, enable_spine (ignored), log_detection.
        camelCase aliases are accepted.
        """
        merged = dict(options or {})
        merged.update(overrides)
        self.options = self.options.merged(merged)

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def build_ik_config(
        self,
        bones: Sequence[BoneRef],
        options: Optional[Dict[str, Any]] = None
    ) -> List[ChainDescriptor]:
        """
        Build the IK chain list for a skeleton.

        Args:
            bones: Flat bone sequence (skeleton snapshot)
            options: Per-call option overrides

        Returns:
            0-4 ChainDescriptors in order left leg, right leg, left arm, right arm
        """
        return self.build(bones, options).chains

    def build(
        self,
        bones: Sequence[BoneRef],
        options: Optional[Dict[str, Any]] = None
    ) -> IKBuildResult:
        """
        Build the full IK configuration for a skeleton.

        Raises:
            MalformedCollaboratorResponse: if the mapper or detector returns
                unusable data
        """
        config = self.options.merged(options)
        recorder = DiagnosticsRecorder(self.observers, verbose=config.log_detection)
        result = IKBuildResult(bones=list(bones), events=recorder.events)

        # Step 1: Map bones to canonical roles
        mapping = coerce_mapping(self.mapper.map(bones))
        recorder.emit(MappingEvent(
            complete=mapping.complete,
            platform_name=mapping.platform_name,
            bones_mapped=len(mapping.bones),
            bone_count=len(bones),
        ))
        if not mapping.complete:
            return result

        result.mapping_complete = True
        result.platform_name = mapping.platform_name

        # Step 2: Bone index map
        bone_index = build_bone_index(bones)
        self._check_mapped_bones(mapping, bone_index)

        # Step 3: Detect axes and create constraints
        result.constraints = self._detect_constraints(mapping, recorder)

        # Step 4: Target slots (and the target bones themselves, on a copy)
        result.targets = reserve_target_slots(len(bones), mapping.bones, bone_index)
        result.bones = create_target_bones(bones, result.targets)

        # Step 5: Limb chains
        for limb_name in LIMB_ORDER:
            chain = self._build_limb(limb_name, mapping, bone_index, result, config, recorder)
            if chain is not None:
                result.chains.append(chain)

        recorder.emit(BuildSummaryEvent(
            chain_count=len(result.chains),
            chains=tuple(c.name for c in result.chains),
        ))
        return result

    # =========================================================================
    # STEPS
    # =========================================================================

    @staticmethod
    def _check_mapped_bones(mapping: BoneMapping, bone_index: Dict[str, int]) -> None:
        for role, bone in mapping.bones.items():
            uid = getattr(bone, 'uid', None)
            if uid is None or uid not in bone_index:
                name = getattr(bone, 'name', repr(bone))
                raise MalformedCollaboratorResponse(
                    f"Mapped bone '{name}' for role '{role}' is not part of the skeleton"
                )

    def _detect_constraints(
        self,
        mapping: BoneMapping,
        recorder: DiagnosticsRecorder
    ) -> Dict[str, Optional[ConstraintDescriptor]]:
        """Axis detection + biomechanics for every mapped knee/elbow bone."""
        constraints: Dict[str, Optional[ConstraintDescriptor]] = {}
        unconstrained = []

        for joint_key, (role, joint_name) in CONSTRAINED_JOINTS.items():
            bone = mapping.get(role)
            if bone is None:
                continue

            axis = coerce_axis_result(self.detector.detect_primary_axis(bone), bone.name)
            recorder.emit(AxisDetectionEvent(
                joint=joint_key,
                role=role,
                bone_name=bone.name,
                axis=axis.axis,
                direction=tuple(float(c) for c in axis.direction),
                confidence=axis.confidence,
                name_hint=classify_biomechanical(bone.name),
            ))

            constraint = create_from_biomechanics(
                joint_name, axis.direction, self.table, warn=recorder.warn)

            constraints[joint_key] = constraint
            if constraint is None:
                unconstrained.append(joint_key)

        recorder.emit(ConstraintEvent(
            created=sum(1 for c in constraints.values() if c is not None),
            joints=tuple(constraints.keys()),
            unconstrained=tuple(unconstrained),
        ))
        return constraints

    def _build_limb(
        self,
        limb_name: str,
        mapping: BoneMapping,
        bone_index: Dict[str, int],
        result: IKBuildResult,
        config: BuildOptions,
        recorder: DiagnosticsRecorder
    ) -> Optional[ChainDescriptor]:
        if limb_name in LEG_CHAINS:
            if not config.enable_legs:
                return None
            limb = LEG_CHAINS[limb_name]
            builder = build_leg_chain
        else:
            if not config.enable_arms:
                return None
            limb = ARM_CHAINS[limb_name]
            builder = build_arm_chain

        missing = missing_roles(limb_name, mapping.bones)
        if missing:
            recorder.emit(LimbSkippedEvent(limb=limb_name, missing=missing))
            return None

        chain = builder(
            limb_name,
            mapping.bones,
            bone_index,
            result.constraints,
            result.targets[limb["target"]].index,
        )

        if limb_name in ARM_CHAINS and len(chain.links) < 2:
            recorder.warn("IK-CHAIN", f"{limb_name}: no upper arm or shoulder mapped - "
                                      f"chain has a single link")
        return chain


# =============================================================================
# REPORT
# =============================================================================

def generate_report(result: IKBuildResult) -> str:
    """
    Generate a human-readable report of a build.

    Args:
        result: IKBuildResult from AutoConstraintBuilder.build()

    Returns:
        Multi-line string report
    """
    lines = []
    lines.append("=" * 60)
    lines.append("AUTO IK REPORT")
    lines.append("=" * 60)
    lines.append("")

    if not result.mapping_complete:
        lines.append("Bone mapping incomplete - rig unsupported")
        lines.append("")
        lines.append("=" * 60)
        return "\n".join(lines)

    lines.append(f"Platform: {result.platform_name or 'Unknown (fuzzy matching)'}")
    lines.append(f"Bones (with targets): {len(result.bones)}")
    lines.append(f"Chains: {len(result.chains)}")
    lines.append("")

    lines.append("-" * 40)
    lines.append("IK CHAINS")
    lines.append("-" * 40)

    for chain in result.chains:
        lines.append(f"\n{chain.name}:")
        lines.append(f"  target: {chain.target} ({result.bones[chain.target].name})")
        lines.append(f"  effector: {chain.effector} ({result.bones[chain.effector].name})")
        for link in chain.links:
            lines.append(f"  link {link.index} ({result.bones[link.index].name}):")
            c = link.constraint
            if c is None:
                lines.append("    unconstrained")
            else:
                axis = ", ".join(f"{float(v):.2f}" for v in c.twist_axis)
                lines.append(f"    {c.type} axis=({axis})")
                lines.append(f"    twist: {rad_to_deg(c.twist_min):.1f}deg - "
                             f"{rad_to_deg(c.twist_max):.1f}deg")
                lines.append(f"    swing: {rad_to_deg(c.swing_radius):.1f}deg")

    lines.append("")
    lines.append("-" * 40)
    lines.append("SKIPPED LIMBS")
    lines.append("-" * 40)

    skipped = [e for e in result.events if isinstance(e, LimbSkippedEvent)]
    if skipped:
        for e in skipped:
            lines.append(f"  {e.limb}: missing {', '.join(e.missing)}")
    else:
        lines.append("  None")

    lines.append("")
    lines.append("=" * 60)

    return "\n".join(lines)
