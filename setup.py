from setuptools import setup, find_packages

setup(
    name="stitch",
    version="0.1.0",
    description="Chat-style resume JSON edits w/ field paths, a prioritized AI request queue & keyword re-scoring",
    packages=find_packages(include=["stitch", "stitch.*"]),
    install_requires=[
        "typer<0.26",
        "rich",
        "python-docx",
        "openai",
        "python-dotenv",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-socket",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "stitch=stitch.cli.app:app",
        ],
    },
    python_requires=">=3.11",
)
