"""ftool CLI layer.

Expose ``cli`` and ``main`` lazily so that importing ``ftool.cli`` does not
pull in textual and duckdb before a command needs them.
"""

__all__ = ["cli", "main"]


def __getattr__(name):  # pragma: no cover - trivial lazy import
    if name in {"cli", "main"}:
        from .main import cli as _cli
        from .main import main as _main

        return _cli if name == "cli" else _main
    raise AttributeError(name)
