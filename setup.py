from setuptools import find_packages, setup

setup(
    name="mpxml",
    version="0.3.0",
    description="Compile component template ASTs into mini-program markup",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "rich>=13.0",
        "rich-click>=1.7",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "click>=8.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "mpxml=mpxml.cli.main:cli",
        ],
    },
    zip_safe=False,
)
