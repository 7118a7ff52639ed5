"""Client for the ClickHouse native TCP protocol with typed columnar blocks."""

__version__ = "0.1.0"