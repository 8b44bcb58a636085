# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niftidecode package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
""" Image descriptor built from a decoded NIfTI1 header

The descriptor holds the header values a consumer of the voxel data needs,
as plain Python numbers, with spacings and scaling widened to float64.  It
also records the byte order of the header, which is the byte order of the
voxel data.
"""
from functools import reduce
from operator import mul

import numpy as np

from .errors import DataTypeError
from .volumeutils import asstr
from .nifti1 import data_type_codes

# NIFTI_FTYPE_NIFTI1_1; header and data in one file
NIFTI1_SINGLE = 1


class ImageDescriptor:
    """ Summary of a NIfTI1 image, derived from its header

    Use :meth:`from_header` to build one.  Attributes follow the NIfTI1
    header field names where there is a matching field.

    Attributes
    ----------
    ndim : int
        rank of the voxel grid, ``dim[0]``
    nx, ny, nz, nt, nu, nv, nw : int
        extents along the 7 axes; 1 beyond ``ndim``
    dim : tuple
        the 8 ``dim`` values as stored
    nvox : int
        number of voxels, product of the extents
    nbyper : int
        bytes per voxel
    datatype : int
        NIfTI1 datatype code
    dx, dy, dz, dt, du, dv, dw : float
        grid spacings along the 7 axes
    pixdim : tuple
        the 8 ``pixdim`` values as float
    byteorder : {'<', '>'}
        byte order of the header and voxel data
    """

    def __init__(self):
        self.ndim = 0
        self.nx = self.ny = self.nz = self.nt = 1
        self.nu = self.nv = self.nw = 1
        self.dim = (0,) + (1,) * 7
        self.nvox = 1
        self.nbyper = 0
        self.datatype = 0

        self.dx = self.dy = self.dz = self.dt = 1.0
        self.du = self.dv = self.dw = 1.0
        self.pixdim = (1.0,) * 8

        self.scl_slope = 0.0
        self.scl_inter = 0.0
        self.cal_min = 0.0
        self.cal_max = 0.0

        self.qform_code = 0
        self.sform_code = 0

        self.freq_dim = 0
        self.phase_dim = 0
        self.slice_dim = 0

        self.slice_code = 0
        self.slice_start = 0
        self.slice_end = 0
        self.slice_duration = 0.0

        self.quatern_b = self.quatern_c = self.quatern_d = 0.0
        self.qoffset_x = self.qoffset_y = self.qoffset_z = 0.0
        self.qfac = 1.0
        self.srow = np.zeros((3, 4))

        self.toffset = 0.0
        self.xyz_units = 0
        self.time_units = 0

        self.nifti_type = NIFTI1_SINGLE

        self.intent_code = 0
        self.intent_p1 = self.intent_p2 = self.intent_p3 = 0.0
        self.intent_name = ''
        self.descrip = ''
        self.aux_file = ''

        self.byteorder = '<'

    @classmethod
    def from_header(klass, header):
        """ Build descriptor from a checked ``Nifti1Header``

        Parameters
        ----------
        header : Nifti1Header
            decoded header.  The byte order recorded is the header's.

        Returns
        -------
        desc : ImageDescriptor
        """
        hdr = header.structarr
        desc = klass()
        dim = tuple(int(d) for d in hdr['dim'])
        desc.dim = dim
        desc.ndim = dim[0]
        extents = [dim[i] if i <= desc.ndim and dim[i] > 0 else 1
                   for i in range(1, 8)]
        (desc.nx, desc.ny, desc.nz, desc.nt,
         desc.nu, desc.nv, desc.nw) = extents
        desc.nvox = reduce(mul, extents, 1)
        desc.datatype = int(hdr['datatype'])
        desc.nbyper = int(hdr['bitpix']) // 8

        pixdim = tuple(float(p) for p in hdr['pixdim'])
        desc.pixdim = pixdim
        (desc.dx, desc.dy, desc.dz, desc.dt,
         desc.du, desc.dv, desc.dw) = pixdim[1:]
        # qfac is the sign of pixdim[0]; 0 counts as 1
        desc.qfac = -1.0 if pixdim[0] < 0 else 1.0

        desc.scl_slope = float(hdr['scl_slope'])
        desc.scl_inter = float(hdr['scl_inter'])
        desc.cal_min = float(hdr['cal_min'])
        desc.cal_max = float(hdr['cal_max'])

        desc.qform_code = int(hdr['qform_code'])
        desc.sform_code = int(hdr['sform_code'])

        # axis numbers as stored, 1-based, 0 for not set
        freq, phase, slice = header.get_dim_info()
        desc.freq_dim = 0 if freq is None else freq + 1
        desc.phase_dim = 0 if phase is None else phase + 1
        desc.slice_dim = 0 if slice is None else slice + 1

        desc.slice_code = int(hdr['slice_code'])
        desc.slice_start = int(hdr['slice_start'])
        desc.slice_end = int(hdr['slice_end'])
        desc.slice_duration = float(hdr['slice_duration'])

        for name in ('quatern_b', 'quatern_c', 'quatern_d',
                     'qoffset_x', 'qoffset_y', 'qoffset_z'):
            setattr(desc, name, float(hdr[name]))
        desc.srow = np.array([hdr['srow_x'], hdr['srow_y'], hdr['srow_z']],
                             dtype=np.float64)

        desc.toffset = float(hdr['toffset'])
        desc.xyz_units, desc.time_units = header.get_xyzt_codes()

        desc.intent_code = int(hdr['intent_code'])
        desc.intent_p1 = float(hdr['intent_p1'])
        desc.intent_p2 = float(hdr['intent_p2'])
        desc.intent_p3 = float(hdr['intent_p3'])
        desc.intent_name = asstr(hdr['intent_name'].item())
        desc.descrip = asstr(hdr['descrip'].item())
        desc.aux_file = asstr(hdr['aux_file'].item())

        desc.byteorder = header.endianness
        return desc

    @property
    def shape(self):
        """ Data shape, ``dim[1..ndim]`` with non-positive extents as 1 """
        extents = (self.nx, self.ny, self.nz, self.nt,
                   self.nu, self.nv, self.nw)
        return extents[:self.ndim]

    @property
    def zooms(self):
        """ Grid spacings along the ``ndim`` axes """
        return self.pixdim[1:self.ndim + 1]

    def get_data_dtype(self):
        """ Numpy dtype of the voxel data, in the recorded byte order

        Raises ``DataTypeError`` for datatype codes that are not known, or
        that have no fixed width numpy type.
        """
        code = self.datatype
        try:
            dtype = data_type_codes.dtype[code]
        except KeyError:
            raise DataTypeError(f'data code {code} not recognized',
                                'datatype', code)
        if dtype.itemsize == 0:
            raise DataTypeError(f'data code {code} not supported',
                                'datatype', code)
        return dtype.newbyteorder(self.byteorder)

    def __repr__(self):
        if self.datatype in data_type_codes:
            label = data_type_codes.label[self.datatype]
        else:
            label = self.datatype
        return (f'{self.__class__.__name__}(shape={self.shape}, '
                f'datatype={label}, '
                f'byteorder={self.byteorder!r})')
