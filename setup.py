#!/usr/bin/env python3
"""Setup script for the pymupdf-lattice ruled table extractor."""

from setuptools import find_packages, setup

setup(
    name="pymupdf-lattice",
    version="1.0.0",
    description="Recover ruled (lattice) tables from PDF rulings and text",
    packages=find_packages(include=["pymupdf_lattice", "pymupdf_lattice.*"]),
    python_requires=">=3.10",
    install_requires=[
        "numba",
        "numpy",
        "pymupdf",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
