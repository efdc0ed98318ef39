"""
EdgeCore Trading Journal

Personal trading journal: spreadsheet import of discretionary trades,
descriptive analytics, and what-if leverage/rotation simulators over
sequences of TP/SL outcomes.

WARNING: This system does NOT place trades. The simulators are what-if tools.
"""

__version__ = "0.1.0"
__author__ = "EdgeCore Team"
