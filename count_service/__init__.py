"""Named-counter HTTP service with pluggable storage backends."""

__version__ = "0.1.0"
