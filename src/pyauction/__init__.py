"""Cricket player auction engine: validation, recommendations and phase transitions."""

__version__ = "0.1.0"
