"""
Key management for the AXVM client.
"""

from .keychain import KeyChain

__all__ = ["KeyChain"]
