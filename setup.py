from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="virtual-trader",
    version="1.0.0",
    author="Virtual Trader Team",
    description="Simulated stock trading engine with average-cost portfolio accounting",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Financial and Insurance Industry",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Office/Business :: Financial :: Investment",
    ],
    python_requires=">=3.9",
    install_requires=[
        "pandas>=1.3.0",
        "numpy>=1.21.0",
    ],
    extras_require={
        "test": [
            "pytest>=6.0",
            "pytest-asyncio>=0.21",
        ],
        "dev": [
            "pytest>=6.0",
            "pytest-asyncio>=0.21",
            "pytest-cov",
            "black",
            "flake8",
            "mypy",
        ],
        "jupyter": [
            "jupyter",
            "matplotlib",
        ],
    },
    entry_points={
        "console_scripts": [
            "virtual-trader=virtual_trader.examples.basic_demo:comprehensive_demo",
        ],
    },
)
