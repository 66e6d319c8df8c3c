"""Version information for Keygen Verifier"""

__version__ = "0.1.0"
