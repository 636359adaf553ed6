"""
Setup script for the mockseam package.
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="mockseam",
    version="0.1.0",
    author="mockseam developers",
    description="Test doubles with static, constructor and capability seams",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Framework :: Pytest",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Testing",
        "Topic :: Software Development :: Testing :: Mocking",
    ],
    python_requires=">=3.9",
    install_requires=[
        req for req in requirements
        if not req.startswith("pytest") and not req.startswith("hypothesis")
        and not req.startswith("black") and not req.startswith("mypy")
    ],
    extras_require={
        "pytest": [
            "pytest>=7.0",
        ],
        "dev": [
            "pytest>=7.0",
            "hypothesis>=6.0",
            "black>=23.0",
            "mypy>=1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "mockseam-validate-config=mockseam.cli:main",
        ],
    },
)
