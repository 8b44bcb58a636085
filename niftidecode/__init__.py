# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niftidecode package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##

from .info import long_description as __doc__, __version__

__doc__ += """
Quickstart
==========

::

   import niftidecode as nd

   descriptor, voxels = nd.load('my_file.nii')
   data = voxels.as_array(descriptor.get_data_dtype())

   with open('my_file.nii', 'rb') as fobj:
       descriptor, voxels = nd.decode(fobj.read())
"""

# module imports
from . import imageglobals
from . import nifti1

# object imports
from .errors import (NiftiDecodeError, HeaderDataError, ByteOrderError,
                     HeaderSizeError, StorageModeError, DataTypeError,
                     ImageDataError, TruncatedDataError)
from .nifti1 import Nifti1Header
from .descriptor import ImageDescriptor
from .voxels import VoxelSlice, scale_samples
from .loadsave import decode, load
