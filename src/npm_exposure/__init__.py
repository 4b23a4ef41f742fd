"""npm-exposure core package.

Decides whether an npm project's declared ranges or locked versions include
known-bad package versions. ``core.classify`` is the pure entrypoint; the CLI
and directory scan build on it.
"""

__version__ = "0.1.0"

__all__ = [
    "core",
]
