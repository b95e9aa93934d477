from __future__ import annotations

import os

from setuptools import find_packages, setup


def _read_readme() -> str:
    repo_root = os.path.abspath(os.path.dirname(__file__))
    path = os.path.join(repo_root, "DESIGN.md")
    if not os.path.exists(path):
        return ""
    with open(path, encoding="utf-8") as f:
        return f.read()


setup(
    name="vosealias",
    version="0.1.0",
    description="O(1) weighted discrete sampling with Vose's alias method",
    long_description=_read_readme(),
    long_description_content_type="text/markdown",
    packages=find_packages(include=["vosealias", "vosealias.*"]),
    python_requires=">=3.9",
    install_requires=["numpy>=1.17"],
    extras_require={"test": ["pytest>=7"]},
    entry_points={"console_scripts": ["vosealias-demo=vosealias.cli.demo:main"]},
)
