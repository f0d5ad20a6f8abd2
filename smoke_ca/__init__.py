"""Smoke propagation cellular automaton.

Sub-packages:
    model   - grid, cells and the tick-driven engine
    export  - CSV, image and report output
"""
import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
