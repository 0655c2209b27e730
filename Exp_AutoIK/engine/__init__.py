# Exp_AutoIK/engine/__init__.py
"""
Auto IK engine - bone data in, IK chain descriptors out.

Modules:
    ik_math.py          - Vector/angle utilities
    biomechanics.py     - Range-of-motion table
    joint_classifier.py - Name -> joint kind / biomechanical entry
    constraints.py      - Swing-twist constraint factories
    skeleton.py         - Bones and collaborator contracts
    ik_chains.py        - Limb definitions, target slots, chain assembly
    auto_builder.py     - AutoConstraintBuilder

No scene or UI imports.
"""

# =============================================================================
# RE-EXPORTS
# =============================================================================

from .biomechanics import (
    HINGE,
    BALL,
    UNIVERSAL,
    DEFAULT_BIOMECHANICS,
    BiomechanicalEntry,
    BiomechanicalTable,
    default_table,
    biomechanics_path,
    save_biomechanics_to_file,
    load_biomechanics_from_file,
)

from .joint_classifier import (
    UNKNOWN,
    KIND_RULES,
    BIOMECHANICAL_RULES,
    classify_kind,
    classify_biomechanical,
    classification_disagreement,
)

from .constraints import (
    ConstraintDescriptor,
    create_hinge_constraint,
    create_ball_constraint,
    create_from_biomechanics,
)

from .skeleton import (
    MalformedCollaboratorResponse,
    Bone,
    BoneMapping,
    AxisResult,
    make_skeleton,
    build_bone_index,
)

from .ik_chains import (
    LEG_CHAINS,
    ARM_CHAINS,
    LIMB_ORDER,
    ChainDescriptor,
    LinkDescriptor,
    TargetSlot,
)

from .auto_builder import (
    AutoConstraintBuilder,
    IKBuildResult,
    generate_report,
)

__all__ = [
    # Biomechanics
    'HINGE',
    'BALL',
    'UNIVERSAL',
    'DEFAULT_BIOMECHANICS',
    'BiomechanicalEntry',
    'BiomechanicalTable',
    'default_table',
    'biomechanics_path',
    'save_biomechanics_to_file',
    'load_biomechanics_from_file',
    # Classification
    'UNKNOWN',
    'KIND_RULES',
    'BIOMECHANICAL_RULES',
    'classify_kind',
    'classify_biomechanical',
    'classification_disagreement',
    # Constraints
    'ConstraintDescriptor',
    'create_hinge_constraint',
    'create_ball_constraint',
    'create_from_biomechanics',
    # Skeleton
    'MalformedCollaboratorResponse',
    'Bone',
    'BoneMapping',
    'AxisResult',
    'make_skeleton',
    'build_bone_index',
    # Chains
    'LEG_CHAINS',
    'ARM_CHAINS',
    'LIMB_ORDER',
    'ChainDescriptor',
    'LinkDescriptor',
    'TargetSlot',
    # Builder
    'AutoConstraintBuilder',
    'IKBuildResult',
    'generate_report',
]
