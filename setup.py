"""
Setup script for resume-studio project.

Allows development installation with `pip install -e .`
"""

from setuptools import setup, find_namespace_packages

setup(
    name="resume-studio",
    version="0.3.0",
    packages=find_namespace_packages(include=["src*", "frontend*", "parser_service*"]),
    py_modules=["version"],
    python_requires=">=3.11",
    install_requires=[
        "flask>=3.0",
        "fastapi>=0.110",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "python-multipart>=0.0.9",
        "python-dotenv>=1.0",
        "pymongo>=4.6",
        "langchain-core>=0.2",
        "langchain-openai>=0.1",
        "httpx>=0.27",
        "pypdf>=4.0",
        "reportlab>=4.0",
        "supabase>=2.4",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
)
