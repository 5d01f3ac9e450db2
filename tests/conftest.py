"""Shared pytest configuration for the WACS client tests."""

pytest_plugins = ["wacs.testing.conftest"]
