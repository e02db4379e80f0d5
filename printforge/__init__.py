"""
PrintForge: AI generation of 3D printable models.
"""

__version__ = "0.1.0"
