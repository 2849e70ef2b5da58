
from setuptools import setup, find_packages
setup(
    name="static_func_hash",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=["numpy"],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["static-func-hash = static_func_hash.cli:main"]},
    python_requires=">=3.10",
)
