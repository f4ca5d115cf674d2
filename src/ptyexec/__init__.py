"""ptyexec — run one shell command inside a real pseudo-terminal session."""

__version__ = "0.1.0"
