#!/usr/bin/env python

from setuptools import setup

setup(
    name="projectadmin",
    version="1.0.0",
    description="Backend for administering customers, projects, project files and the product catalog",
    packages=[
        "projectadmin",
        "projectadmin.api",
        "projectadmin.elastic",
        "projectadmin.objectstorage",
        "projectadmin.stores",
    ],
    include_package_data=True,
    zip_safe=False,
    keywords=["API", "administration"],
    python_requires=">=3.11",
    install_requires=[
        "fastapi",
        "elasticsearch[async]~=8.6",
        "aiobotocore",
        "types-aiobotocore-s3",
        "async-lru",
        "python-dotenv",
        "pydantic>=2",
        "pydantic-settings",
        "typing-extensions",
        "uvicorn",
    ],
    extras_require={
        "dev": [
            "pytest",
            "anyio",
            "httpx",
            "mypy",
            "flake8",
            "pre-commit",
        ]
    },
    entry_points={
        "console_scripts": [
            "projectadmin = projectadmin.__main__:main",
        ]
    },
)
