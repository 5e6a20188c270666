"""kcc — kernel config checker.

Verifies that a kernel build configuration enables a declared set of
``CONFIG_*`` flags, and can append missing flags to a config file.
"""

__version__ = "0.1.0"
