"""
Setup script for sigmat

sigmat is pure Python on top of numpy and scipy, so this script only
declares metadata:
1. Version is read from src/sigmat/__init__.py
2. Packages are discovered under src/
3. Test tooling is available through the 'test' extra
"""

from pathlib import Path
from setuptools import setup, find_packages


# Read version from src/sigmat/__init__.py
def get_version():
    version_file = Path("src/sigmat/__init__.py")
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
    name="sigmat",
    version=get_version(),
    description="Matrix storage and lazy algebra layer for signal processing",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.20",
        "scipy>=1.7",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    zip_safe=True,
)
