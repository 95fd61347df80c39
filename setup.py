#!/usr/bin/env python3

import os
import re

from setuptools import find_packages, setup

TOPDIR = os.path.dirname(os.path.abspath(__file__))


def version():
    """Return the current version from the package."""
    with open(os.path.join(TOPDIR, 'src', 'useflags', '__init__.py')) as f:
        return re.search(r"^__version__\s*=\s*'([^']+)'", f.read(), re.MULTILINE).group(1)


setup(**dict(
    name='useflags',
    version=version(),
    description='save, print and compare the effective USE flags of a Gentoo system',
    license='BSD',
    package_dir={'': 'src'},
    packages=find_packages('src'),
    python_requires='>=3.8',
    install_requires=['snakeoil'],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': ['useflags = useflags.scripts:main'],
    },
    classifiers=[
        'License :: OSI Approved :: BSD License',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
    ],
))
