"""
poolscan - Reads hand-filled "squares" pool sheets into a structured grid.

Subpackages:
    - layout: Reconstruction engine (fragments -> 10x10 grid)
    - recognition: Image -> fragments / grid producers
"""

__version__ = "0.1.0"
