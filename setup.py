"""Setup script for codeflow."""

from setuptools import setup, find_packages

setup(
    name="codeflow",
    version="0.1.0",
    description="Code flow analysis: construct inventory, linear flowchart and explanations",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "tree-sitter>=0.23.0",
        "tree-sitter-javascript>=0.23.0",
        "flask>=3.0.0",
        "flask-cors>=4.0.0",
        "watchdog>=3.0.0",
        "networkx>=3.2.1",
        "pyyaml>=6.0.1",
        "click>=8.1.7",
        "rich>=13.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.4",
        ]
    },
    entry_points={
        "console_scripts": [
            "codeflow=codeflow.cli:main",
        ]
    },
)
