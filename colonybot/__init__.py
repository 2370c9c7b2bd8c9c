"""colonybot — tick-driven colony economy built around extraction sites."""

__version__ = "0.1.0"
