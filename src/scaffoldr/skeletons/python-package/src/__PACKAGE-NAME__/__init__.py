"""__PROJECT-NAME__: __DESCRIPTION__"""

__all__ = ["__version__"]
__version__ = "0.1.0"
