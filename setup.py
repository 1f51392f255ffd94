# setup.py
from setuptools import setup, find_packages

setup(
    name="sitewatch",
    version="0.1.0",
    description="Single-site crawler that snapshots a website to disk and reports changes between runs",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"sitewatch": ["templates/*.j2"]},
    include_package_data=True,
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "Jinja2>=3.1",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": ["sitewatch=sitewatch.cli:cli"],
    },
    python_requires=">=3.11",
)
