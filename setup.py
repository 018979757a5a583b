# setup.py
from setuptools import setup, find_packages

setup(
    name="expense-tracker-client",
    version="0.1.0",
    description="Client and CLI for the expense tracker REST backend",
    author="Your Name",
    author_email="you@example.com",
    url="https://github.com/yourusername/expense-tracker-client",
    packages=find_packages(include=["expense_tracker", "expense_tracker.*"]),
    python_requires=">=3.9",
    install_requires=[
        "click>=7.0",
        "pyyaml>=5.3",
        "python-dotenv>=0.19",
        "anyio>=3.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "expense-tracker=expense_tracker.cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
