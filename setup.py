"""
setup.py

Packaging metadata and CLI entry point for shorts-factory.

Version: 0.1.0: topic-to-script generation with Gemini and OpenAI
providers, per-scene images and narration, renderer hand-off, click CLI
and FastAPI service.
"""
from setuptools import setup, find_packages

setup(
    name="shorts-factory",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "click",
        "pydantic>=2.0",
        "pyyaml",
        "python-dotenv",
        "openai>=1.0",
        "google-genai",
        "httpx",
        "fastapi",
        "uvicorn",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "hypothesis",
        ],
    },
    entry_points={
        "console_scripts": [
            "shorts-factory=cli:cli",
        ],
    },
    python_requires=">=3.9",
)
