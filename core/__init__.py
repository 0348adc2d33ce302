"""core package initialization.

Making `core` an explicit package so imports like `import core.session`
work reliably when running `main.py` from the project root.
"""

__all__ = ["rng", "numeric", "tuning", "catalogs", "save", "session"]
