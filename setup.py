#!/usr/bin/env python
"""A setuptools-based script for installing modkitctl."""

# Note: this is used for distribution builds that still call setup.py
#       directly. All metadata lives in pyproject.toml.

import setuptools

if __name__ == "__main__":
    setuptools.setup()
