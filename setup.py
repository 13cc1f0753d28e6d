"""
Setup script for blockminmax.
"""

from setuptools import setup, find_packages

setup(
    name="blockminmax",
    version="0.1.0",
    description="Per-cell minimum/maximum gridding of scattered x y z point clouds",
    author="blockminmax developers",
    author_email="example@example.com",
    url="https://github.com/example/blockminmax",
    packages=find_packages(include=["blockminmax", "blockminmax.*"]),
    install_requires=[
        "numpy>=1.20.0",
        "matplotlib>=3.4.0",
        "tqdm>=4.60.0",
    ],
    entry_points={
        "console_scripts": [
            "blockminmax=blockminmax.main:main",
            "blockminmax-compare=blockminmax.compare:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Topic :: Scientific/Engineering :: GIS",
    ],
    python_requires=">=3.8",
)
