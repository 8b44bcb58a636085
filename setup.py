#!/usr/bin/env python
# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niftidecode package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""
Setuptools entrypoint

Package metadata lives in ``niftidecode/info.py``.

This file should not be run directly. To install, use:

    pip install .

To install with the test dependencies, use:

    pip install .[test]

"""
import os
from os.path import join as pjoin

from setuptools import setup, find_packages


def read_vars_from(ver_file):
    """ Read variables from Python text file

    Parameters
    ----------
    ver_file : str
        Filename of file to read

    Returns
    -------
    info_vars : dict
        variables read from `ver_file`
    """
    ns = {}
    with open(ver_file, 'rt') as fobj:
        exec(fobj.read(), ns)
    return ns


info = read_vars_from(pjoin(os.path.dirname(os.path.abspath(__file__)),
                            'niftidecode', 'info.py'))

setup(
    name=info['NAME'],
    version=info['__version__'],
    maintainer=info['MAINTAINER'],
    description=info['description'],
    long_description=info['long_description'],
    license=info['LICENSE'],
    classifiers=info['CLASSIFIERS'],
    platforms=info['PLATFORMS'],
    python_requires=info['PYTHON_REQUIRES'],
    install_requires=info['REQUIRES'],
    extras_require={'test': info['TEST_REQUIRES']},
    packages=find_packages(include=['niftidecode', 'niftidecode.*']),
)
