"""Platform admin - scaffold and upgrade platform projects from tiered templates."""

__version__ = "1.2.0"
