"""
Setup script for the secret-poker package.

Installs the ``secret_poker`` package from ``src/``. The ledger client
and wallet are not dependencies: callers inject their own.
"""

from setuptools import setup, find_packages

setup(
    name="secret-poker",
    version="1.0.0",
    description="Off-chain orchestration for a poker table smart contract: "
                "actions, query permits, batched submission and response decoding",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "build",
            "wheel",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
