"""Multi-step wizard engine and the Add Docker Files scaffolding wizard."""

__version__ = "0.1.0"
