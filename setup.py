"""
Setup script for tiny-ds.
"""

from setuptools import setup, find_packages

setup(
    name="tiny-ds",
    version="0.1.0",
    packages=find_packages(include=["tiny_ds", "tiny_ds.*"]),
    package_data={"tiny_ds": ["py.typed"]},
    python_requires=">=3.8",
    extras_require={"test": ["pytest>=7.0.0"]},
)
