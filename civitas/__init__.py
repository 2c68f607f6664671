"""civitas: heredity, linguistic drift, and social hierarchy for agent civilizations."""

__version__ = "0.1.0"
