"""Availability, scheduling and hiring-pipeline engine for a home-care agency."""

__version__ = "0.1.0"
