"""Test fixtures for Binarius tests.

- archives: Release artifacts built in memory (zip, tar.gz, raw binary),
  including hostile archives with path traversal and symlink entries

Import fixtures in your tests using:
    from tests.fixtures.archives import terraform_zip, make_zip
"""

__all__ = ["archives"]
