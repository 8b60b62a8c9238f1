"""MapDrop: geotagged posts, votes and badges."""

__version__ = "0.1.0"
