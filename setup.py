#!/usr/bin/env python3
"""
Setup script for shtools
"""

from setuptools import setup, find_packages
import os
import sys

# Import the version without importing the package's dependencies
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), 'shtools'))
from __version__ import __version__

# README for long_description
def read_file(filename):
    with open(os.path.join(os.path.dirname(__file__), filename), encoding='utf-8') as f:
        return f.read()

setup(
    name='shtools',
    version=__version__,
    description='Small Linux desktop shell utilities: clipboard copy, kill by name, '
                'file watch, background run with notifications',
    long_description=read_file('README.md'),
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=['tests', 'docs']),
    python_requires='>=3.9',
    install_requires=[
        'python-xlib',   # X display probe before handing data to xclip
    ],
    extras_require={
        'dev': [
            'pytest>=7.0',
            'pytest-cov',
            'pytest-timeout',
        ],
    },
    entry_points={
        'console_scripts': [
            'copy=shtools.cli:copy_main',
            'nkill=shtools.cli:nkill_main',
            'wtch=shtools.cli:wtch_main',
            'bgrun=shtools.cli:bgrun_main',
            'mkscript=shtools.cli:mkscript_main',
            'shtools=shtools.cli:main',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: End Users/Desktop',
        'Topic :: Utilities',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Programming Language :: Python :: 3.13',
        'Operating System :: POSIX :: Linux',
        'Environment :: X11 Applications',
        'Environment :: Console',
    ],
)
