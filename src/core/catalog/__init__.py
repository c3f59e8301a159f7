"""Catalogue record flows (materials, tags, projects)."""

from .service import CatalogService

__all__ = ["CatalogService"]
