"""
Residence-hall community topology: who is connected, who is isolated, and
which members hold separate groups together.
"""

__version__ = "0.1.0"
