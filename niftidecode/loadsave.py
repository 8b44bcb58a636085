# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niftidecode package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
""" Decode NIfTI1 single file buffers and files """

from .nifti1 import Nifti1Header
from .descriptor import ImageDescriptor
from .voxels import locate_voxels
from .fileio import read_bytes
from . import imageglobals


def decode(buffer):
    """ Decode NIfTI1 single file contents in `buffer`

    Parameters
    ----------
    buffer : bytes-like
        whole (uncompressed) file contents.  The buffer is not changed, and
        the returned voxel view keeps a reference to it.

    Returns
    -------
    descriptor : ImageDescriptor
        image description derived from the header
    voxels : VoxelSlice
        read-only view of the voxel bytes in `buffer`

    Raises
    ------
    NiftiDecodeError
        or one of its subclasses, if the header cannot be decoded, fails
        its checks, or the buffer is too short for the voxel data.
    """
    header = Nifti1Header.from_buffer(buffer)
    imageglobals.logger.debug('Header is valid')
    descriptor = ImageDescriptor.from_header(header)
    voxels = locate_voxels(buffer, header, descriptor)
    return descriptor, voxels


def load(filename, chunk_size=None, max_workers=None):
    """ Read and decode NIfTI1 single file `filename`

    Parameters
    ----------
    filename : str or path-like
        uncompressed ``.nii`` file
    chunk_size : None or int, optional
        read in chunks of this many bytes using worker threads; see
        :func:`niftidecode.fileio.read_bytes`
    max_workers : None or int, optional
        maximum number of worker threads for chunked reads

    Returns
    -------
    descriptor : ImageDescriptor
    voxels : VoxelSlice
    """
    buffer = read_bytes(filename, chunk_size, max_workers)
    return decode(buffer)
