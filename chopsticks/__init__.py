"""Chopsticks - a multi-player hand game simulator.

A rule engine, legal-action enumeration, bijective numbering of positions
and actions, and simulation-based agents for the hand game chopsticks.
"""

__version__ = "0.1.0"
__author__ = "Chopsticks Team"

from chopsticks.utils.seeding import set_seed

__all__ = ["__version__", "set_seed"]
