"""Core relay logic for Proposal Drafter.

This package contains the LLM provider layer and the streaming relay.
It has ZERO dependency on any web framework.
"""

__version__ = "0.1.0"
