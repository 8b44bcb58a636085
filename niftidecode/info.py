"""Define static niftidecode metadata for niftidecode

The long description parameter is used in the niftidecode top-level
docstring, and in ``setup.py``.  We exec this file in ``setup.py``, so it
cannot import niftidecode or use relative imports.
"""

__version__ = '0.1.0'

description = 'Decoder for NIfTI1 single file images'

long_description = """
===========
niftidecode
===========

Decode NIfTI1 single file (``.nii``) images from an in-memory buffer.

The decoder probes the header byte order, decodes the 348 byte header,
checks it, builds an image descriptor, and returns a zero-copy view of the
voxel data.
"""

# versions for dependencies
NUMPY_MIN_VERSION = '1.20'
PYTEST_MIN_VERSION = '6.0'

NAME = 'niftidecode'
MAINTAINER = 'niftidecode developers'
LICENSE = 'MIT license'
CLASSIFIERS = ['Development Status :: 3 - Alpha',
               'Intended Audience :: Science/Research',
               'License :: OSI Approved :: MIT License',
               'Operating System :: OS Independent',
               'Programming Language :: Python :: 3',
               'Topic :: Scientific/Engineering']
PLATFORMS = 'OS Independent'
PYTHON_REQUIRES = '>=3.8'
REQUIRES = [f'numpy>={NUMPY_MIN_VERSION}']
TEST_REQUIRES = [f'pytest>={PYTEST_MIN_VERSION}']
