from setuptools import setup, find_packages

setup(
    name="phasesolar",
    version="0.1.0",
    description="Per-phase solar, battery and grid energy allocation model for a household",
    packages=find_packages(include=["phasesolar", "phasesolar.*"]),
    install_requires=[
        "numpy",
        "pandas",
        "matplotlib",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
