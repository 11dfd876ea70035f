"""
cargo-downgrade

Downgrade the dependencies of a Cargo project to the versions that were
available on crates.io at a given point in time.
"""

__version__ = "0.1.0"

from .cli import main

__all__ = ["main"]
