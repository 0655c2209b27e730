# ##### BEGIN GPL LICENSE BLOCK #####
#
#  This program is free software; you can redistribute it and/or
#  modify it under the terms of the GNU General Public License
#  as published by the Free Software Foundation; either version 2
#  of the License, or (at your option) any later version.
#
#  This program is distributed in the hope that it will be useful,
#  but WITHOUT ANY WARRANTY; without even the implied warranty of
#  MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#  GNU General Public License for more details.
#
#  You should have received a copy of the GNU General Public License
#  along with this program; if not, write to the Free Software Foundation,
#  Inc., 51 Franklin Street, Fifth Floor, Boston, MA 02110-1301, USA.
#
# ##### END GPL LICENSE BLOCK #####

"""
Exploratory Auto IK - swing-twist constraints and IK chains from a skeleton.

    from Exp_AutoIK import AutoConstraintBuilder, NameBoneMapper, OffsetAxisDetector

    builder = AutoConstraintBuilder(NameBoneMapper(), OffsetAxisDetector())
    result = builder.build(bones)
"""

__version__ = "1.0.0"

from .autoik_config import BuildOptions, DEFAULT_OPTIONS
from .engine import (
    AutoConstraintBuilder,
    IKBuildResult,
    generate_report,
    ConstraintDescriptor,
    ChainDescriptor,
    LinkDescriptor,
    MalformedCollaboratorResponse,
    Bone,
    BoneMapping,
    AxisResult,
    make_skeleton,
    classify_kind,
    classify_biomechanical,
    create_hinge_constraint,
    create_ball_constraint,
    create_from_biomechanics,
    default_table,
)
from .rig import NameBoneMapper, OffsetAxisDetector

__all__ = [
    'BuildOptions',
    'DEFAULT_OPTIONS',
    'AutoConstraintBuilder',
    'IKBuildResult',
    'generate_report',
    'ConstraintDescriptor',
    'ChainDescriptor',
    'LinkDescriptor',
    'MalformedCollaboratorResponse',
    'Bone',
    'BoneMapping',
    'AxisResult',
    'make_skeleton',
    'classify_kind',
    'classify_biomechanical',
    'create_hinge_constraint',
    'create_ball_constraint',
    'create_from_biomechanics',
    'default_table',
    'NameBoneMapper',
    'OffsetAxisDetector',
]
