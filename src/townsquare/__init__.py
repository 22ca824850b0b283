"""Townsquare: communities, memberships and posts over a relational store."""

__version__ = "0.1.0"
