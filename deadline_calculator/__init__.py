"""
Legal deadline calculator for Brazilian procedural terms.
"""

__version__ = "0.1.0"
