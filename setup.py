from setuptools import setup
from pathlib import Path

this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

setup(
    name="menuaim",
    version="1.0.0",
    description="Trajectory-aware menu item activation (menu aim) with a zendriver page binding",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=["menuaim"],
    install_requires=[
        "zendriver",
        "Pillow",
    ],
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
)
