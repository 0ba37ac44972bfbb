# setup.py
from setuptools import setup, find_packages

setup(
    name="shapedb",
    version="0.1.0",
    description="Shape-aware convenience layer over DB-API connections",
    author="Swift Fox",
    packages=find_packages(
        exclude=(
            "tests",
            "tests.*",
            "docs",
            "dist",
            "build",
        )
    ),
    python_requires=">=3.10",
    install_requires=[
        "psycopg2-binary>=2.9",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
    },
)
