"""
episync — mirror an Episerver content-type schema into TypeScript models.
"""

__version__ = "0.1.0"
