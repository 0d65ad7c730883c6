# SPDX-License-Identifier: MIT
"""Build description generators for kiln."""

from kiln.generators.build_options import BuildOptionsGenerator
from kiln.generators.generator import BaseGenerator, Generator
from kiln.generators.link_plan import LinkPlanGenerator

__all__ = [
    "BaseGenerator",
    "BuildOptionsGenerator",
    "Generator",
    "LinkPlanGenerator",
]
