"""Digital book ("Libro del Edificio") core for the asset-management dashboard."""

__version__ = "0.1.0"
