"""Route record validation against a canonical map reference list."""

__version__ = "0.1.0"
