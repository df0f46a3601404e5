"""Valkey connection settings for the Valkey flight store."""

from .config import ValkeyConfig

__all__ = ['ValkeyConfig']
