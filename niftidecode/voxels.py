# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niftidecode package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
""" Locate voxel data in a NIfTI1 single file buffer

The voxel data is returned as a read-only view into the caller's buffer; no
voxel bytes are copied until the caller asks for a copy.
"""
import numpy as np

from .errors import HeaderDataError, TruncatedDataError
from .volumeutils import apply_read_scaling
from . import imageglobals

# 348 byte header plus the 4 byte extension flag
MIN_VOX_OFFSET = 352


class VoxelSlice:
    """ Read-only view of the voxel bytes in a buffer

    Parameters
    ----------
    buffer : bytes-like
        buffer holding the whole file
    offset : int
        byte offset of the voxel data in `buffer`
    length : int
        number of voxel data bytes
    endianness : {'<', '>'}
        byte order of the voxel data
    """

    def __init__(self, buffer, offset, length, endianness):
        view = memoryview(buffer).cast('B')
        end = offset + length
        if end > len(view):
            raise TruncatedDataError(
                f'Voxel data needs bytes {offset} to {end}, but buffer has '
                f'only {len(view)} bytes; file truncated or corrupt?',
                offset, length, len(view))
        self.offset = offset
        self.length = length
        self.endianness = endianness
        self.data = view.toreadonly()[offset:end]

    def __len__(self):
        return self.length

    def tobytes(self):
        """ Return copy of voxel bytes """
        return self.data.tobytes()

    def as_array(self, dtype):
        """ Return voxel bytes as 1D array of `dtype`, without copying

        Parameters
        ----------
        dtype : dtype specifier
            voxel type.  The byte order of the slice replaces any byte order
            in `dtype`.

        Returns
        -------
        arr : ndarray
            read-only 1D array sharing memory with the buffer
        """
        dtype = np.dtype(dtype).newbyteorder(self.endianness)
        return np.frombuffer(self.data, dtype=dtype)

    def __repr__(self):
        return (f'{self.__class__.__name__}(offset={self.offset}, '
                f'length={self.length}, endianness={self.endianness!r})')


def data_offset(header):
    """ Return byte offset of voxel data for `header`

    ``vox_offset`` values below 352 would put data inside the header block;
    we read from 352 instead.  A ``vox_offset`` that is not finite raises
    ``HeaderDataError``.

    >>> from niftidecode.nifti1 import Nifti1Header
    >>> data_offset(Nifti1Header())
    352
    """
    vox_offset = float(header['vox_offset'])
    if not np.isfinite(vox_offset):
        raise HeaderDataError(f'vox offset {vox_offset} is not finite',
                              'vox_offset', vox_offset)
    if vox_offset < MIN_VOX_OFFSET:
        return MIN_VOX_OFFSET
    return int(vox_offset)


def data_size(descriptor):
    """ Return number of voxel data bytes for image `descriptor`

    This is ``nx * ny * nz * nt * nu`` times the bytes per voxel.  The time
    and component extents come from ``dim[4]`` and ``dim[5]`` whenever those
    are positive, even past the rank; otherwise they count as 1.
    """
    nt, nu = (d if d > 0 else 1 for d in descriptor.dim[4:6])
    n_elements = descriptor.nx * descriptor.ny * descriptor.nz * nt * nu
    return n_elements * descriptor.nbyper


def locate_voxels(buffer, header, descriptor):
    """ Return view of voxel data in `buffer`

    Parameters
    ----------
    buffer : bytes-like
        whole file contents, starting with the header
    header : Nifti1Header
        checked header decoded from `buffer`
    descriptor : ImageDescriptor
        descriptor built from `header`

    Returns
    -------
    voxels : VoxelSlice
        read-only view of the voxel bytes

    Raises
    ------
    HeaderDataError
        if ``vox_offset`` is not finite, or ``bitpix`` gives no whole bytes
        per voxel
    TruncatedDataError
        if `buffer` ends before the voxel data does
    """
    if descriptor.nbyper < 1:
        bitpix = int(header['bitpix'])
        raise HeaderDataError(f'bitpix {bitpix} gives no whole bytes per '
                              'voxel', 'bitpix', bitpix)
    offset = data_offset(header)
    length = data_size(descriptor)
    voxels = VoxelSlice(buffer, offset, length, descriptor.byteorder)
    imageglobals.logger.debug('Voxel data at offset %d, %d bytes',
                              offset, length)
    return voxels


def scale_samples(samples, slope, inter):
    """ Return ``slope * samples + inter`` as floats

    NIfTI1 uses a ``scl_slope`` of 0 to mean there is no scaling.  For a
    `slope` of 0 or None, we return `samples` unchanged, whatever `inter`
    is.  The identity scaling (1, 0) also returns `samples` unchanged.

    Parameters
    ----------
    samples : array-like
        stored sample values, usually int16
    slope : None or float
    inter : None or float

    Returns
    -------
    scaled : ndarray or `samples`

    Examples
    --------
    >>> scale_samples(np.array([-3], dtype=np.int16), 2.0, 1.0)
    array([-5.], dtype=float32)
    """
    if slope is None or slope == 0:
        return samples
    return apply_read_scaling(np.asarray(samples), slope, inter)
