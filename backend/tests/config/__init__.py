"""Test configuration package: marker registration shared by conftest."""
