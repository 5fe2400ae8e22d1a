from setuptools import setup, find_packages

setup(
    name="herd-simulator",
    version="0.1.0",
    description="Thundering-herd recovery simulator comparing client retry strategies",
    author="adamfilli",
    packages=find_packages(include=["herdsim", "herdsim.*"]),
    install_requires=[
        "matplotlib",
        "pandas",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "herdsim=herdsim.cli:main",
        ],
    },
    include_package_data=True,
    python_requires=">=3.10",
)
