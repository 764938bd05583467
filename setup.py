from setuptools import setup, find_packages
import os
import re

# Read version from copywatch/__init__.py
with open(os.path.join('copywatch', '__init__.py'), 'r') as f:
    version_match = re.search(r"^__version__ = ['\"]([^'\"]*)['\"]", f.read(), re.M)
    if version_match:
        version = version_match.group(1)
    else:
        raise RuntimeError("Unable to find version string in copywatch/__init__.py")

# Read long description from README.md
with open('README.md', 'r') as f:
    long_description = f.read()

# Read requirements from requirements.txt
with open('requirements.txt', 'r') as f:
    requirements = [line for line in f.read().splitlines() if line and not line.startswith('#')]

setup(
    name="copywatch",
    version=version,
    author="CopyWatch contributors",
    description="Live progress estimation for robocopy directory transfers",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: Microsoft :: Windows",
    ],
    python_requires=">=3.8",
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0", "pytest-mock>=3.10"],
    },
    entry_points={
        "console_scripts": [
            "copywatch=main:main",
        ],
    },
    include_package_data=True,
)
