#!/usr/bin/env python3
"""
Setup script for the Grid Summation Library

Builds the pure Python package for compensated weighted summation of
functions over regular D-dimensional grids.
"""

from pathlib import Path

from setuptools import setup, find_packages

# Package metadata
PACKAGE_NAME = "kahan-gridsum"
VERSION = "1.0.0"
DESCRIPTION = "Compensated weighted grid summation for D-dimensional Riemann integrals"
AUTHOR = "Grid Summation Contributors"
LICENSE = "MIT"

# Read long description from README
def read_readme():
    readme_path = Path(__file__).parent / "README.md"
    if readme_path.exists():
        with open(readme_path, "r", encoding="utf-8") as f:
            return f.read()
    return DESCRIPTION

# Package requirements
def get_requirements():
    """Get package requirements."""
    base_requirements = [
        "numpy>=1.19.0",
        "torch>=1.10.0",
    ]

    dev_requirements = [
        "pytest>=6.0",
        "pytest-cov>=2.0",
    ]

    return {
        "base": base_requirements,
        "dev": dev_requirements,
    }

# Setup configuration
def main():
    """Main setup function."""
    requirements = get_requirements()

    setup(
        name=PACKAGE_NAME,
        version=VERSION,
        description=DESCRIPTION,
        long_description=read_readme(),
        long_description_content_type="text/markdown",
        author=AUTHOR,
        license=LICENSE,

        # Package configuration
        packages=find_packages(exclude=["tests", "tests.*"]),

        # Dependencies
        install_requires=requirements["base"],
        extras_require={
            "dev": requirements["dev"],
            "test": requirements["dev"],
        },
        python_requires=">=3.8",

        classifiers=[
            "Intended Audience :: Science/Research",
            "License :: OSI Approved :: MIT License",
            "Programming Language :: Python :: 3",
            "Topic :: Scientific/Engineering :: Mathematics",
            "Topic :: Scientific/Engineering :: Physics",
            "Operating System :: OS Independent",
        ],
        keywords=[
            "numerical", "integration", "riemann-sum", "kahan",
            "floating-point", "precision", "scientific-computing"
        ],
    )

if __name__ == "__main__":
    main()
