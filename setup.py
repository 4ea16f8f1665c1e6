# setup.py
from setuptools import setup, find_packages

setup(
    name="chemrxn-rxnfile",
    version="0.1.0",
    description="Reader and writer for MDL RXN and RDFile reaction files.",
    author="Your Name",
    author_email="you@example.com",
    url="https://github.com/your-github-username/chemrxn-rxnfile",
    packages=find_packages(exclude=("tests", "tests.*", "examples")),
    python_requires=">=3.9",
    install_requires=[
        "rdkit>=2022.9.5",
        "pandas>=1.5.0",
        "tqdm>=4.64.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Chemistry",
    ],
)
