#!/usr/bin/env python
# -*- coding: utf-8 -*-
import re

from setuptools import setup


# Get the version
version_regex = r'__version__ = ["\']([^"\']*)["\']'
with open('noggin/__init__.py', 'r') as f:
    text = f.read()
    match = re.search(version_regex, text)

    if match:
        version = match.group(1)
    else:
        raise RuntimeError("No version number found!")


packages = [
    'noggin',
    'noggin.common',
]

setup(
    name='noggin',
    version=version,
    description='Declarative HTTP head parsing for Python',
    long_description=open('README.rst').read(),
    packages=packages,
    package_data={'': ['README.rst']},
    package_dir={'noggin': 'noggin'},
    include_package_data=True,
    license='MIT License',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3 :: Only',
        'Programming Language :: Python :: Implementation :: CPython',
    ],
    python_requires='>=3.9',
    install_requires=[
        'rfc3986>=1.4.0'
    ],
    extras_require={
        'test': ['pytest', 'mock'],
    }
)
