from setuptools import setup, find_packages
import os

# Read the README file for long description
readme_path = os.path.join(os.path.dirname(__file__), "README.md")
try:
    with open(readme_path, "r", encoding="utf-8") as fh:
        long_description = fh.read()
except FileNotFoundError:
    long_description = "TickTick Sync - two-way sync between TickTick projects and a markdown task page"

requirements = [
    "typer>=0.9.0",
    "rich>=13.5.2",
    "requests>=2.28.0",
    "python-dotenv>=1.0.0",
    "python-dateutil>=2.8.2",
    "dateparser>=1.1.0",
    "pydantic>=2.0.0",
    "thefuzz>=0.19.0",
]

setup(
    name="ticksync",
    version="1.0.0",
    author="TickTick Sync Team",
    description="Two-way sync between TickTick projects and a markdown (Obsidian) task page",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "Topic :: Office/Business :: Scheduling",
        "Topic :: Utilities",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Environment :: Console",
        "Natural Language :: English",
    ],
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=7.1.3",
            "pytest-mock>=3.10.0",
        ],
        "dev": [
            "pytest>=7.1.3",
            "pytest-mock>=3.10.0",
            "black>=22.0.0",
            "flake8>=5.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "ticksync=ticksync.ticksync:app",
        ],
    },
    keywords="ticktick dida365 obsidian markdown sync productivity task-management cli",
    zip_safe=False,
)
