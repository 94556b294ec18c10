# csaf_cli/__init__.py
"""
CSAF advisory CLI package
"""

__version__ = "1.0.0"

__all__ = ['__version__']
