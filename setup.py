from setuptools import find_packages, setup

setup(
    name="prharvest",
    version="0.1.0",
    description="Extract automated code-review suggestions from review pages and turn them into LLM-ready prompts",
    packages=find_packages(include=["prharvest", "prharvest.*"]),
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=[
        "beautifulsoup4>=4.12",
        "pydantic>=2.6",
        "PyYAML>=6.0",
    ],
    extras_require={
        "ui": ["fastapi>=0.110", "uvicorn>=0.29"],
        "test": ["pytest>=8.0", "httpx>=0.27", "fastapi>=0.110"],
    },
    entry_points={"console_scripts": ["prharvest=prharvest.cli:main"]},
)
