"""Pull request head filters for branch discovery pipelines."""

__version__ = "0.1.0"
