"""
Masterless - staged puppet apply runs on remote hosts
"""

__version__ = "1.0.0"
