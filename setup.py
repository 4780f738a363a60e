import os
from importlib.machinery import SourceFileLoader
from setuptools import setup, find_packages


__version__ = (
    SourceFileLoader("seqex.version", os.path.join("seqex", "version.py"))
    .load_module()
    .__version__
)


def read(fname):
    return open(os.path.join(os.path.dirname(__file__), fname)).read()


setup(
    name="seqex",
    version=__version__,
    python_requires=">=3.8",
    install_requires=[
        "pyhumps==1.6.1",
        "grpcio",
        "protobuf>=4.25",
        "numpy",
        "click>=8.2",
        "rich",
        "pyyaml",
        "tqdm",
    ],
    extras_require={
        "historical": ["cassandra-driver"],
        "dev": ["pytest", "pytest-mock", "flake8", "black", "cassandra-driver"],
    },
    entry_points={
        "console_scripts": ["seqex=seqex_cli.main:main"],
    },
    author="The seqex authors",
    description="Encode TensorFlow SequenceExamples and query TensorFlow Serving models over gRPC",
    license="Apache License 2.0",
    keywords="TensorFlow Serving, SequenceExample, gRPC, ScyllaDB, Feature Store",
    packages=find_packages(exclude=["tests", "tests.*"]),
    long_description=read("README.md"),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Topic :: Utilities",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3",
        "Intended Audience :: Developers",
    ],
)
