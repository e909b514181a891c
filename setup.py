"""
Setup script for the Region Coder application.
"""

from setuptools import setup, find_packages

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

# Separate development requirements
dev_requirements = [req for req in requirements if any(dev in req for dev in ["pytest", "black", "flake8", "mypy", "sphinx"])]
install_requirements = [req for req in requirements if req not in dev_requirements]

setup(
    name="region-coder",
    version="1.0.0",
    author="Data Analytics Team",
    description="Reverse geocoding of game rounds to countries and regions",
    long_description="Region Coder - resolves latitude/longitude positions and region identifiers to countries and administrative regions, and annotates geography game rounds with per-country analytics.",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    package_data={
        "region_coder": ["data/*.json"],
    },
    include_package_data=True,
    install_requires=install_requirements,
    extras_require={
        "dev": dev_requirements,
    },
    python_requires=">=3.8",
    entry_points={
        "console_scripts": [
            "region-coder=main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
