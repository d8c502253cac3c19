"""
Configuration constants for compose service.
"""

# Intermediate objects created when one target needs more than K sources
INTERMEDIATE_SUFFIX = ".part-{level}-{index}"

# Binary size units used to name composed objects, largest first
SIZE_UNITS = (
    ("TiB", 1024**4),
    ("GiB", 1024**3),
    ("MiB", 1024**2),
    ("KiB", 1024),
)
