from setuptools import setup
from pathlib import Path

this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

setup(
    name="humanreach",
    version="0.1.0",
    description="Find elements across frames and shadow roots and interact with them like a human, for zendriver",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=[
        "humanreach",
        "humanreach.dom",
        "humanreach.interaction",
        "humanreach.keyboard",
        "humanreach.mouse",
    ],
    install_requires=[
        "zendriver",
        "Pillow",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.10",
)
