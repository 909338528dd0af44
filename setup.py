"""Package setup for media_api."""

from setuptools import setup, find_packages

setup(
    name="media-api-client",
    version="1.0.0",
    description="Single-shot JSON API request builder with observable delivery",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "requests>=2.31.0",
        "reactivex>=4.0.0",
    ],
    extras_require={
        "ui": [
            "tqdm>=4.66.0",
            "colorlog>=6.8.0",
        ],
        "test": [
            "pytest>=7.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "media-api=media_api.cli:main",
        ],
    },
)
