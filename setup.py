from setuptools import setup, find_packages

setup(
    name="gitsmart",
    version="1.0.2",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "requests",
        "pyyaml",
        "textual>=0.47",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "gitsmart=gitsmart.cli:main",
        ],
    },
    description="Smart staging that filters debug lines out of patches, "
                "with AI-generated commit messages.",
)
