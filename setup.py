from setuptools import setup, find_namespace_packages

setup(
    name="rustspace_api",
    version="1.0.0",
    packages=find_namespace_packages(include=["src", "src.*", "config", "config.*"]),
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy[asyncio]",
        "asyncpg",
        "alembic",
        "pydantic",
        "pydantic-settings",
        "python-jose",
        "python-multipart",
        "bcrypt",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "httpx",
            "aiosqlite",
        ],
    },
)
