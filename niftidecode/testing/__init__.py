# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niftidecode package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Utilities for testing"""

import numpy as np

from ..nifti1 import Nifti1Header, data_type_codes


def make_header_data(endianness='<', shape=(2, 2, 2), datatype=np.int16,
                     **fields):
    """ Return writeable structured array for a valid single file header

    Parameters
    ----------
    endianness : endian code, optional
    shape : sequence, optional
        data shape; sets ``dim``
    datatype : dtype specifier or NIfTI1 type code, optional
        sets ``datatype`` and ``bitpix``
    \\*\\*fields : keyword arguments
        values for any other header fields

    Returns
    -------
    hdr_data : ndarray
        0-d structured array with ``Nifti1Header.template_dtype`` fields
    """
    hdr_data = Nifti1Header.default_structarr(endianness)
    hdr_data['dim'][0] = len(shape)
    hdr_data['dim'][1:len(shape) + 1] = shape
    hdr_data['datatype'] = data_type_codes.code[datatype]
    hdr_data['bitpix'] = data_type_codes.dtype[datatype].itemsize * 8
    hdr_data['pixdim'][1:4] = 1
    hdr_data['scl_slope'] = 0
    hdr_data['scl_inter'] = 0
    for key, value in fields.items():
        hdr_data[key] = value
    return hdr_data


def make_nifti_bytes(data, endianness='<', vox_offset=352, **fields):
    """ Return bytes of single file NIfTI1 image holding array `data`

    Data is written in Fortran order, following a header, 4 zero bytes of
    extension flag, and zero padding up to `vox_offset`.

    Parameters
    ----------
    data : ndarray
        voxel array; its shape and dtype set the header ``dim`` and
        ``datatype``
    endianness : endian code, optional
    vox_offset : int, optional
        value for ``vox_offset``, and start of data when >= 352
    \\*\\*fields : keyword arguments
        values for any other header fields

    Returns
    -------
    contents : bytes
    """
    data = np.asarray(data)
    hdr_data = make_header_data(endianness, data.shape, data.dtype,
                                vox_offset=vox_offset, **fields)
    start = max(vox_offset, 352)
    header_block = hdr_data.tobytes() + b'\x00' * (start - 348)
    out_dtype = data.dtype.newbyteorder(endianness)
    return header_block + data.astype(out_dtype).tobytes(order='F')
