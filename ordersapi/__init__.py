"""HTTP service and Redis repository for creating, listing, updating and deleting orders."""

__version__ = "0.1.0"