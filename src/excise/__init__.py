"""Remove TypeScript source files together with the imports that reference them."""

__version__ = "0.1.0"
