"""Shared utility functions for the MBS rules backend."""

from .date_parser import parse_flexible_date

__all__ = ["parse_flexible_date"]
