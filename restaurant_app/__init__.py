"""
Restaurant service: restaurants, their menus and their employees over JSON.
"""

__version__ = "1.0.0"
