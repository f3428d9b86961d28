"""
trackfit: incremental curve fits for segmented centroid tracks.

Packages:
    core: Point sequences, fit accumulators, segments and geometric queries
    config: Package defaults and logging configuration
    services: Explicit-span fitting, summaries and batch processing
"""

__version__ = "1.0.0"
