# setup.py
from setuptools import setup, find_packages

setup(
    name="symterm",
    version="0.1.0",
    description="Symbolic term runtime: identity-keyed terms, Hold/Release evaluator, graph snapshots",
    packages=find_packages(include=["symterm", "symterm.*"]),
    python_requires=">=3.10",
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    zip_safe=False,
)
