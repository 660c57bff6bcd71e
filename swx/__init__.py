"""
Space-weather snapshot pipeline: fetch, normalize, classify, persist.
"""

__version__ = "0.3.0"
