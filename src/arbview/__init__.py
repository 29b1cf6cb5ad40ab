"""
Arbitrage Monitoring Dashboard.

An asynchronous client for the arbitrage backend API: polls JSON endpoints,
smooths metric transitions with animated values, and renders a live
terminal dashboard.
"""

__version__ = "1.0.0"
__author__ = "Tim"
