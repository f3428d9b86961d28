"""
Configuration package.

Modules:
    settings: Package defaults, configuration classes and logging setup
"""
