"""
Short link service: short-ID allocation and cached redirects.
"""

__version__ = "1.0.0"
