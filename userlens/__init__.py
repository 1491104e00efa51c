"""userlens: incremental analysis of UI components."""

__version__ = "0.1.0"
