"""Setup script for devcompanion Python package."""

from setuptools import setup, find_packages

setup(
    name="devcompanion",
    version="0.1.0",
    description="Developer tooling for the AI coding desktop app - module finder and tool sync",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "PyYAML",
    ],
    extras_require={
        "dev": ["pytest", "black", "mypy"],
    },
    entry_points={
        "console_scripts": [
            "find-module=devcompanion.structure.cli:main",
        ],
    },
)
