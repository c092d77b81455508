"""Pydantic v2 schemas shared between the API and frontend types."""

from .proposals import *  # noqa: F401,F403
