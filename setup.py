#!/usr/bin/env python3
"""
Templar Setup
Compiled template cache and render engine
"""

from setuptools import setup, find_packages
from pathlib import Path


def get_version():
    """Get version from __init__.py"""
    version_file = Path(__file__).parent / "src" / "templar" / "__init__.py"
    if version_file.exists():
        with open(version_file, 'r') as f:
            for line in f:
                if line.startswith("__version__"):
                    return line.split("=")[1].strip().strip('"\'')
    return "0.1.0"


def read_readme():
    """Read README file"""
    readme_path = Path(__file__).parent / "README.md"
    if readme_path.exists():
        with open(readme_path, 'r', encoding='utf-8') as f:
            return f.read()
    return ""


# Core dependencies
install_requires = [
    "jinja2>=3.0.0",          # Template grammar and code generation
    "markupsafe>=2.0.0",      # Safe markup for nested template output
    "aiofiles>=0.8.0",        # Non-blocking template reads
]

# Optional dependencies
extras_require = {
    # Development tools
    "dev": [
        "pytest>=6.0.0",
        "pytest-asyncio>=0.18.0",
        "pytest-cov>=3.0.0",
        "black>=21.0.0",
        "isort>=5.0.0",
        "flake8>=3.9.0",
        "mypy>=0.910",
    ],
    "test": [
        "pytest>=6.0.0",
        "pytest-asyncio>=0.18.0",
    ],
}

setup(
    name="templar",
    version=get_version(),
    author="Templar Team",
    description="Compiled template cache and asynchronous render engine",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
        "Topic :: Text Processing :: Markup :: HTML",
        "Framework :: AsyncIO",
    ],
    keywords="templates rendering cache jinja2 async",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    package_data={
        "templar.templating": [
            "resources/*.html",
        ]
    },
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "templar=templar.cli:main",
        ],
    },
    zip_safe=False,
)
