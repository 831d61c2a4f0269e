# setup.py
from setuptools import setup, find_packages

setup(
    name="contact_scout",
    version="0.1.0",
    description="Асинхронный поиск контактов компании на её сайте: email, телефоны, страна, бренды",
    packages=find_packages(exclude=("tests", "tests.*")),
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "lxml>=4.9",
        "pydantic>=2.0",
        "PyYAML>=6.0",
        "click>=8.1",
        "openai>=1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "contact-scout=contact_scout.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
