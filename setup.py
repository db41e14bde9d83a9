#!/usr/bin/env python3
"""
Setup script for pyribotyper
"""

from setuptools import setup, find_packages

setup(
    name="pyribotyper",
    version="0.2.0",
    description="Python toolkit for classifying rRNA sequences from profile search results",
    author="Ribotyper Team",
    author_email="example@example.org",
    packages=find_packages(include=["ribotyper", "ribotyper.*"]),
    install_requires=[
        "pyyaml>=6.0",
        "biopython>=1.79",
        "pandas>=1.4.0",
    ],
    extras_require={
        'test': [
            "pytest>=7.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'ribotyper=ribotyper.cli.main:main',
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
    ],
    python_requires=">=3.8",
)
