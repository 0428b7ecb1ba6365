#!/usr/bin/env python3
"""
Setup script for yamltypes.

yamltypes is pure Python: it builds and reads tagged YAML node trees and
needs no parser or emitter of its own, so there is no extension to build.

Extras:
- test : pytest, for running the suite under tests/
"""

import os
import re
from setuptools import setup


def read_version():
    """Read __version__ from the package without importing it."""
    path = os.path.join(os.path.dirname(os.path.abspath(__file__)),
                        'yamltypes', '__init__.py')
    with open(path, encoding='utf-8') as f:
        match = re.search(r'^__version__ = "([^"]+)"', f.read(), re.M)
    if match is None:
        raise RuntimeError("unable to find __version__ in %s" % path)
    return match.group(1)


setup(
    name='yamltypes',
    version=read_version(),
    description='Tagged YAML node trees for Python values',
    python_requires='>=3.8',
    packages=['yamltypes'],
    package_data={'yamltypes': ['__init__.pyi']},
    extras_require={
        'test': ['pytest'],
    },
)
