from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="pathfinder",
    version="0.1.0",
    author="pathfinder contributors",
    description="Exhaustive search for all minimum-weight paths in weighted directed graphs.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(exclude=("tests", "dev", "examples")),
    python_requires=">=3.9",
    install_requires=["networkx", "PyYAML"],
    extras_require={"test": ["pytest", "networkx"]},
    tests_require=["pytest", "networkx"],
    entry_points={"console_scripts": ["pathfinder=pathfinder.cli:main"]},
)
