from setuptools import setup, find_packages

setup(
    name="keyword-crawler",
    version="1.0.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110.0",
        "uvicorn>=0.27.0",
        "pydantic>=2.0.0",
        "aiohttp>=3.9.0",
        "tenacity>=8.2.0",
    ],
    entry_points={
        "console_scripts": ["keyword-crawler=keyword_crawler.main:run"],
    },
    extras_require={
        "test": [
            "pytest>=8.0.0",
            "pytest-asyncio>=0.23.0",
            "httpx",
        ],
    },
)
