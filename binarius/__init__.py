"""
Binarius - version manager for single-binary command-line tools.

Installs terraform, tofu and terragrunt releases side by side and switches
the active version through a symlink in the user's bin directory.
"""

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("binarius")
except PackageNotFoundError:
    __version__ = "0.1.0"
