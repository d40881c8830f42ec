"""Compare two restic snapshots directory by directory from the terminal."""

__version__ = "0.1.0"