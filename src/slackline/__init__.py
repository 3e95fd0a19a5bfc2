"""Slackline - critical path scheduling with resource leveling and risk simulation."""

__version__ = "0.1.0"
