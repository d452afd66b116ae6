"""tplctl — create a project from a template package."""

__version__ = "0.1.0"
