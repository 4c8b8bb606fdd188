from __future__ import annotations

from pathlib import Path

from setuptools import find_packages, setup

# Read README for long description
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text()

setup(
    # Package metadata
    name="sitediary",
    version="1.0.0",
    description="Site diary AI core: diary selection, rate-limited Gemini calls, REST and GraphQL",
    long_description=long_description,
    long_description_content_type="text/markdown",
    # Package discovery
    packages=find_packages(exclude=["tests", "tests.*"]),
    # Dependencies
    install_requires=[
        "fastapi>=0.110.0",
        "uvicorn>=0.24.0",
        "pydantic>=2.5.0",
        "strawberry-graphql>=0.243.0",
        "google-cloud-aiplatform>=1.38.0",
        "python-dotenv>=1.0.0",
        "cachetools>=5.3.0",
        "tenacity>=8.2.0",
    ],
    # Optional dependencies
    extras_require={
        "genai": [
            "google-generativeai>=0.5.0",
        ],
        "dev": [
            "pytest>=7.0.0",
            "httpx>=0.25.0",
            "mypy>=1.0.0",
            "ruff>=0.1.0",
        ],
    },
    # CLI commands
    entry_points={
        "console_scripts": [
            "sitediary-api=sitediary.api:main",
        ],
    },
    # Python version requirement
    python_requires=">=3.11",
    # PyPI classifiers
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
)
