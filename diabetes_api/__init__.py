"""Diabetes risk prediction service over BRFSS 2015 health indicators."""

__version__ = "1.0.0"
