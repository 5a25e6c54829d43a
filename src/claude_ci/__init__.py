"""claude-ci -- run Claude on a prompt file in CI."""

__version__ = "0.1.0"
