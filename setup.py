# setup.py
from setuptools import setup

setup(
    name="VoxelWorldCore",
    version="0.1.0",
    packages=["world", "engine"],
    python_requires=">=3.8",
    install_requires=["numpy>=1.20"],
    extras_require={"test": ["pytest"]},
)
