"""Project scaffolding system.

Renders the tiered template set into brand-new projects.
"""

from .core import ScaffoldManager, ScaffoldOptions
from .templates import TemplateEngine

__all__ = [
    "ScaffoldManager",
    "ScaffoldOptions",
    "TemplateEngine",
]
