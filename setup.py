from setuptools import setup, find_namespace_packages

setup(
    name="splititer",
    version="0.1.0",
    description="Split one iterator into two lazy iterators by a predicate",
    package_dir={"": "src"},
    packages=find_namespace_packages("src", include=["splititer*"]),
    python_requires=">=3.11",
    install_requires=[
        "pydantic>=2",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
