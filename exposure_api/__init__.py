"""
Exposure Tracker

Classifies repeated biomarker test snapshots against population reference
bands and derives longitudinal trends and insights across tests.
"""
__version__ = "1.0.0"
