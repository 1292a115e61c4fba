"""Roundtable: one question, several AI advisors, optional structured debate."""

__version__ = "0.1.0"
