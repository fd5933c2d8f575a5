"""
Configuration management for shimtrace package.

This package provides functionality for loading and applying
configuration for the instrumentations.
"""

from shimtrace.config.loader import ConfigurationError, apply_config, load_config

__all__ = ['ConfigurationError', 'apply_config', 'load_config']
