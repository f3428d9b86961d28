"""
Models package.

Motion kinds and flat segment summaries. Import directly from the modules:
kinds is needed by the fitting package, which the summary helpers do not use.
"""
