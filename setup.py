"""Setup script for PlanetForge package."""

from setuptools import setup, find_packages

setup(
    name="planetforge",
    version="0.1.0",
    description="Procedural planet surface synthesis: terrain, climate and biomes on a spherical grid",
    packages=find_packages(include=['src', 'src.*']),
    package_data={
        "": ["*.md", "*.txt"],
    },
    include_package_data=True,
    install_requires=[
        "numpy",
        "scipy",
        "matplotlib",
        "opensimplex>=0.4",
        "xarray",
        "structlog",
        "pydantic>=2",
        "pydantic-settings>=2",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    classifiers=[
        "Development Status :: 2 - Pre-Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering",
    ],
    python_requires=">=3.8",
)
