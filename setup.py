# setup.py
"""Setup script for the Duplicate Finder."""

import os

from setuptools import setup, find_packages

setup(
    name="dupe-finder",
    version="1.0.0",
    description="Incremental exact and near-duplicate image finder with batched, resumable scans",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Duplicate Finder Team",
    packages=find_packages(exclude=["*.tests"]),
    python_requires=">=3.8",
    install_requires=[
        "Pillow>=9.1.0",
        "imagehash>=4.0.0",
        "tqdm>=4.50.0",
    ],
    extras_require={
        "test": [
            "pytest>=6.0.0",
            "pytest-cov>=2.10.0",
            "pytest-mock>=3.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "dupe-finder=dupe_finder.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Graphics",
    ],
)
