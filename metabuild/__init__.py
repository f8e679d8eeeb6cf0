"""metabuild — generate, configure and build CMake projects from a target catalog."""

__version__ = "0.1.0"
