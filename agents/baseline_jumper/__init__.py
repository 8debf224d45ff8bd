"""
Baseline Jumper Agent Package

A simple heuristic agent that hops over water holes using the entity
arrays of the observation. Serves as a benchmark and example.
"""

from .agent import FruitRunAgent, create_agent

__all__ = ["FruitRunAgent", "create_agent"]
