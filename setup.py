from setuptools import setup, find_packages

setup(
    name="run-analytics",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    install_requires=[
        "matplotlib>=3.7.0",
        "seaborn>=0.12.0",
        "numpy>=1.24.0",
    ],
    extras_require={
        "test": ["pytest>=7.0.0"],
    },
)
