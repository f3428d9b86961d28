"""
Core package.

Fitting primitives, segment windows and the geometric queries built on them.

Modules:
    constants: Algorithmic constants
    validation: Error types and input validation
    calculations: Shared 2D vector helpers
    points: Optional-point sequences
"""
