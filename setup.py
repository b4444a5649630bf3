"""
setup.py: Setup script for MTG Printing Resolver
"""

from setuptools import setup, find_packages

setup(
    name="mtg-print-resolver",
    version="0.1.0",
    description="Resolve OCR scan evidence to a specific MTG card printing",
    packages=find_packages(exclude=["scripts"]),
    package_data={
        "mtg_resolver": ["data/*.json"],
    },
    python_requires=">=3.9",
    install_requires=[
        "requests>=2.31.0",
        "fastapi>=0.104.0",
        "uvicorn[standard]>=0.24.0",
        "pydantic>=2.5.0",
        "slowapi>=0.1.9",
        "click>=8.1.7",
        "python-dotenv>=1.0.0",
        "python-Levenshtein>=0.21.1",
        "tqdm>=4.66.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "httpx>=0.25.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'mtg-resolve=mtg_resolver.cli.main:cli',
        ],
    },
)
