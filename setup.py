"""
Setup script for solvertypes
"""

from pathlib import Path
from setuptools import setup, find_packages


# Read version from src/solvertypes/__init__.py
def get_version():
    version_file = Path("src/solvertypes/__init__.py")
    if version_file.exists():
        for line in version_file.read_text().splitlines():
            if line.startswith("__version__"):
                return line.split("=")[1].strip().strip('"').strip("'")
    return "0.1.0"


# Read long description from README
def get_long_description():
    readme = Path("README.md")
    if readme.exists():
        return readme.read_text(encoding="utf-8")
    return ""


setup(
    name="solvertypes",
    version=get_version(),
    description="Numeric view/value types (dense/sparse, owned/borrowed) for solver code",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "scipy",
    ],
    extras_require={
        "test": ["pytest"],
    },
    zip_safe=False,
)
