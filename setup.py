from setuptools import setup, find_packages


setup(
    name="feedbot",
    version="0.1.0",
    description="Polling engine for bots on a link/comment/message platform",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "requests>=2.31",
        "typer>=0.12",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
        ]
    },
    entry_points={
        "console_scripts": [
            "feedbot=feedbot.cli:app",
        ]
    },
    python_requires=">=3.10",
)
