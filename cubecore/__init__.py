"""Core primitives for a voxel game: contexts, input, slider callbacks, blocks, fluids and components."""

__version__ = "0.1.0"

__all__ = [
    "block",
    "callbacks",
    "changes",
    "component",
    "context",
    "fluid",
    "input",
    "map",
    "serial",
]