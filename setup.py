# setup.py
from setuptools import setup, find_packages

setup(
    name="rag-navigator",
    version="0.1.0",
    description="Sitemap-driven site indexer that answers questions about the crawled pages",
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"rag_navigator": ["templates/*.j2"]},
    include_package_data=True,
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "lxml>=5.0",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "click>=8.1",
        "Jinja2>=3.1",
        "openai>=1.40",
    ],
    extras_require={
        "test": [
            "pytest>=8.0,<9",
            "pytest-asyncio>=0.23",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "rag-navigator=rag_navigator.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
