from setuptools import setup, find_packages

setup(
    name="spacesaver",
    version="0.1.0",
    description="Approximate top-k frequency counting with bounded memory (Space-Saving)",
    author="adamfilli",
    packages=find_packages(include=["spacesaver", "spacesaver.*"]),
    install_requires=[
        "pandas",
    ],
    extras_require={
        "test": [
            "pytest",
            "matplotlib",
        ],
    },
    include_package_data=True,
    python_requires=">=3.11",
)
