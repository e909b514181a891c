"""
Output generation for batch round annotation.
"""

from .output_generator import OutputGenerator

__all__ = ['OutputGenerator']
