# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niftidecode package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
""" Tests for image descriptor """

import numpy as np
import pytest
from numpy.testing import assert_array_equal

from ..nifti1 import Nifti1Header
from ..descriptor import ImageDescriptor, NIFTI1_SINGLE
from ..errors import DataTypeError
from ..testing import make_header_data


def _descriptor(endianness='<', shape=(2, 2, 2), datatype=np.int16,
                **fields):
    hdr_data = make_header_data(endianness, shape, datatype, **fields)
    return ImageDescriptor.from_header(Nifti1Header(hdr_data.tobytes()))


def test_default():
    desc = ImageDescriptor()
    assert desc.ndim == 0
    assert desc.nvox == 1
    assert desc.shape == ()
    assert desc.nifti_type == NIFTI1_SINGLE
    assert desc.srow.shape == (3, 4)


def test_extents():
    desc = _descriptor(shape=(4, 5, 6))
    assert desc.ndim == 3
    assert (desc.nx, desc.ny, desc.nz) == (4, 5, 6)
    # Beyond the rank
    assert (desc.nt, desc.nu, desc.nv, desc.nw) == (1, 1, 1, 1)
    assert desc.nvox == 120
    assert desc.shape == (4, 5, 6)
    assert desc.dim == (3, 4, 5, 6, 1, 1, 1, 1)
    desc = _descriptor(shape=(2, 3, 4, 5, 6))
    assert (desc.nt, desc.nu) == (5, 6)
    assert desc.nvox == 720
    desc = _descriptor(shape=(2,) * 7)
    assert desc.nvox == 128
    assert desc.shape == (2,) * 7


def test_extents_ignore_stored_values_beyond_rank():
    hdr_data = make_header_data('<', (2, 3))
    hdr_data['dim'][3:] = (7, 0, -1, 9, 9)
    desc = ImageDescriptor.from_header(Nifti1Header(hdr_data.tobytes()))
    assert desc.dim == (2, 2, 3, 7, 0, -1, 9, 9)
    assert (desc.nz, desc.nt, desc.nu, desc.nv, desc.nw) == (1,) * 5
    assert desc.nvox == 6


def test_nonpositive_extents():
    hdr_data = make_header_data('<', (3, 0, 4, -2))
    desc = ImageDescriptor.from_header(Nifti1Header(hdr_data.tobytes()))
    assert (desc.nx, desc.ny, desc.nz, desc.nt) == (3, 1, 4, 1)
    assert desc.nvox == 12
    assert desc.shape == (3, 1, 4, 1)


def test_types():
    for datatype, nbyper in ((np.uint8, 1), (np.int16, 2), (np.int32, 4),
                             (np.float64, 8), (np.complex64, 8), (128, 3)):
        desc = _descriptor(datatype=datatype)
        assert desc.nbyper == nbyper
        assert desc.get_data_dtype().itemsize == nbyper
    desc = _descriptor('>', datatype=np.float32)
    assert desc.datatype == 16
    assert desc.byteorder == '>'
    assert desc.get_data_dtype() == np.dtype('>f4')
    assert desc.get_data_dtype() == np.dtype(np.float32).newbyteorder('>')


def test_spacings():
    hdr_data = make_header_data('>', (2, 3, 4, 5))
    hdr_data['pixdim'] = (-1, 0.1, 2.5, 3, 1.5, 1, 1, 1)
    desc = ImageDescriptor.from_header(Nifti1Header(hdr_data.tobytes()))
    # float32 values widened to float64
    assert desc.dx == float(np.float32(0.1))
    assert isinstance(desc.dx, float)
    assert (desc.dy, desc.dz, desc.dt) == (2.5, 3.0, 1.5)
    assert desc.zooms == (desc.dx, 2.5, 3.0, 1.5)
    assert desc.qfac == -1.0
    assert len(desc.pixdim) == 8
    hdr_data['pixdim'][0] = 0
    desc = ImageDescriptor.from_header(
        Nifti1Header(hdr_data.tobytes(), check=False))
    assert desc.qfac == 1.0


def test_scaling_and_calibration():
    desc = _descriptor(scl_slope=2, scl_inter=-1.5, cal_min=-10, cal_max=20)
    assert (desc.scl_slope, desc.scl_inter) == (2.0, -1.5)
    assert (desc.cal_min, desc.cal_max) == (-10.0, 20.0)
    desc = _descriptor()
    assert (desc.scl_slope, desc.scl_inter) == (0.0, 0.0)


def test_orientation():
    desc = _descriptor(qform_code=1, sform_code=2,
                       quatern_b=0.5, quatern_c=-0.5, quatern_d=0.25,
                       qoffset_x=-90, qoffset_y=-126, qoffset_z=-72,
                       srow_x=(2, 0, 0, -90), srow_y=(0, 2, 0, -126),
                       srow_z=(0, 0, 2, -72))
    assert (desc.qform_code, desc.sform_code) == (1, 2)
    assert (desc.quatern_b, desc.quatern_c, desc.quatern_d) == (
        0.5, -0.5, 0.25)
    assert (desc.qoffset_x, desc.qoffset_y, desc.qoffset_z) == (
        -90.0, -126.0, -72.0)
    assert desc.srow.dtype == np.float64
    assert_array_equal(desc.srow, [[2, 0, 0, -90],
                                   [0, 2, 0, -126],
                                   [0, 0, 2, -72]])


def test_dim_info_and_slicing():
    desc = _descriptor(dim_info=3 | (1 << 2) | (2 << 4),
                       slice_code=3, slice_start=1, slice_end=30,
                       slice_duration=0.5)
    assert (desc.freq_dim, desc.phase_dim, desc.slice_dim) == (3, 1, 2)
    assert desc.slice_code == 3
    assert (desc.slice_start, desc.slice_end) == (1, 30)
    assert desc.slice_duration == 0.5
    desc = _descriptor()
    assert (desc.freq_dim, desc.phase_dim, desc.slice_dim) == (0, 0, 0)


def test_units_and_time():
    desc = _descriptor(xyzt_units=3 | 16, toffset=1.25)
    assert desc.xyz_units == 3
    assert desc.time_units == 16
    assert desc.toffset == 1.25


def test_strings():
    desc = _descriptor(descrip=b'FSL5.0', aux_file=b'aux.txt',
                       intent_code=5, intent_p1=3, intent_p2=4,
                       intent_name=b'f stat')
    assert desc.descrip == 'FSL5.0'
    assert desc.aux_file == 'aux.txt'
    assert desc.intent_name == 'f stat'
    assert desc.intent_code == 5
    assert (desc.intent_p1, desc.intent_p2, desc.intent_p3) == (3.0, 4.0, 0.0)
    # Bytes above 127 decode rather than raising
    desc = _descriptor(descrip=b'\xb5m voxels')
    assert desc.descrip == '\xb5m voxels'


def test_repr():
    desc = _descriptor('>', (2, 3), np.uint8)
    assert repr(desc) == ("ImageDescriptor(shape=(2, 3), datatype=uint8, "
                          "byteorder='>')")
    hdr_data = make_header_data('<', (2, 3))
    hdr_data['datatype'] = 3
    desc = ImageDescriptor.from_header(Nifti1Header(hdr_data.tobytes()))
    assert 'datatype=3' in repr(desc)


def test_get_data_dtype():
    desc = _descriptor('>', (2, 3), np.int16)
    assert desc.get_data_dtype() == np.dtype('>i2')
    # Unknown codes, and codes without a fixed width numpy type
    for code in (3, 1536, 2048):
        hdr_data = make_header_data('<', (2, 3))
        hdr_data['datatype'] = code
        desc = ImageDescriptor.from_header(
            Nifti1Header(hdr_data.tobytes()))
        with pytest.raises(DataTypeError) as excinfo:
            desc.get_data_dtype()
        assert (excinfo.value.field, excinfo.value.value) == ('datatype',
                                                              code)
