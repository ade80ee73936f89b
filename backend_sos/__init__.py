"""
Backend SOS — emergency broadcast relay.

Runs the SOS forge script on request and resolves the transaction hash it
submitted, from the script's console output or its broadcast log.
"""

__version__ = "0.1.0"
