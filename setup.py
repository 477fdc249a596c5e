#!/usr/bin/env python3
"""
kvstore Setup Script
====================
Allows installation of the kvstore package.

Usage:
    pip install -e .           # Development install
    pip install -e .[test]     # Development install with test tools
    pip install .              # Regular install
"""

from setuptools import setup, find_packages

setup(
    name="kvstore",
    version="0.8.1",
    description="In-memory key/value store of strings and string lists, persisted as JSON",
    packages=find_packages(include=["kvstore", "kvstore.*"]),
    python_requires=">=3.10",
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "kvstore=kvstore.cli:main",
        ],
    },
)
