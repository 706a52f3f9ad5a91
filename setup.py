from setuptools import setup, find_namespace_packages

setup(
    name="rangebet",
    version="0.1.0",
    packages=find_namespace_packages(include=["rangebet", "rangebet.*"]),
    py_modules=["simulate"],
    python_requires=">=3.9",
    install_requires=[
        "numpy<2",
        "scipy",
        "matplotlib",
        "pydantic-settings",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
            "hypothesis",
        ],
    },
)
