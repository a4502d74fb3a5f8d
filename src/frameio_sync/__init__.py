"""Frame.io sync connector for no-code document hosts."""

__version__ = "0.1.0"
