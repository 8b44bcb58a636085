# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niftidecode package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
''' Decoding of the NIfTI1 single file header

NIfTI1 format defined at http://nifti.nimh.nih.gov/nifti-1/

The header is a fixed 348 byte record.  There is no byte order flag in the
record; we read ``dim[0]`` (the number of dimensions) as little endian, and,
if that is not a plausible rank, as big endian.  If neither reading is in
1..7, the byte order cannot be determined.

A header that is corrupt in ``dim[0]``, but that gives a plausible
``dim[0]`` in the wrong byte order, will decode without error to nonsense
values.  There is no way to detect this from the header alone.
'''
import numpy as np

from .volumeutils import Recoder, make_dt_codes, asstr
from .wrapstruct import LabeledWrapStruct
from .batteryrunners import Report
from .errors import (ByteOrderError, HeaderSizeError, StorageModeError,
                     DataTypeError, HeaderDataError)
from . import imageglobals

# The 348 byte header record.  Comments give the byte offset of each field;
# numpy packs structured dtypes without alignment padding, so these offsets
# hold in any byte order and on any platform.
header_dtd = [
    ('sizeof_hdr', 'i4'),      # 0; record size, 348
    ('data_type', 'S10'),      # 4; Analyze field, ignored
    ('db_name', 'S18'),        # 14; Analyze field, ignored
    ('extents', 'i4'),         # 32; Analyze field, ignored
    ('session_error', 'i2'),   # 36; Analyze field, ignored
    ('regular', 'S1'),         # 38; Analyze field, ignored
    ('dim_info', 'u1'),        # 39; freq, phase, slice axes, 2 bits each
    ('dim', 'i2', (8,)),       # 40; rank, then 7 extents
    ('intent_p1', 'f4'),       # 56; intent parameters
    ('intent_p2', 'f4'),       # 60
    ('intent_p3', 'f4'),       # 64
    ('intent_code', 'i2'),     # 68; see intent_codes
    ('datatype', 'i2'),        # 70; see data_type_codes
    ('bitpix', 'i2'),          # 72; bits per voxel
    ('slice_start', 'i2'),     # 74; first timed slice
    ('pixdim', 'f4', (8,)),    # 76; qfac, then 7 spacings
    ('vox_offset', 'f4'),      # 108; voxel data start in file
    ('scl_slope', 'f4'),       # 112; value = slope * stored + inter
    ('scl_inter', 'f4'),       # 116
    ('slice_end', 'i2'),       # 120; last timed slice
    ('slice_code', 'u1'),      # 122; see slice_order_codes
    ('xyzt_units', 'u1'),      # 123; space and time unit codes
    ('cal_max', 'f4'),         # 124; display range
    ('cal_min', 'f4'),         # 128
    ('slice_duration', 'f4'),  # 132; seconds per slice acquisition
    ('toffset', 'f4'),         # 136; time of first volume
    ('glmax', 'i4'),           # 140; Analyze field, ignored
    ('glmin', 'i4'),           # 144; Analyze field, ignored
    ('descrip', 'S80'),        # 148; free text
    ('aux_file', 'S24'),       # 228; related file name
    ('qform_code', 'i2'),      # 252; see xform_codes
    ('sform_code', 'i2'),      # 254; see xform_codes
    ('quatern_b', 'f4'),       # 256; rotation quaternion b, c, d
    ('quatern_c', 'f4'),       # 260
    ('quatern_d', 'f4'),       # 264
    ('qoffset_x', 'f4'),       # 268; qform translation
    ('qoffset_y', 'f4'),       # 272
    ('qoffset_z', 'f4'),       # 276
    ('srow_x', 'f4', (4,)),    # 280; sform affine rows
    ('srow_y', 'f4', (4,)),    # 296
    ('srow_z', 'f4', (4,)),    # 312
    ('intent_name', 'S16'),    # 328; free text
    ('magic', 'S4')            # 344; b'n+1\0' for single files
]

header_dtype = np.dtype(header_dtd)

_dtdefs = (  # code, label, dtype definition, niistring
    (0, 'none', np.void, ""),
    (1, 'binary', np.void, ""),
    (2, 'uint8', np.uint8, "NIFTI_TYPE_UINT8"),
    (4, 'int16', np.int16, "NIFTI_TYPE_INT16"),
    (8, 'int32', np.int32, "NIFTI_TYPE_INT32"),
    (16, 'float32', np.float32, "NIFTI_TYPE_FLOAT32"),
    (32, 'complex64', np.complex64, "NIFTI_TYPE_COMPLEX64"),
    (64, 'float64', np.float64, "NIFTI_TYPE_FLOAT64"),
    (128, 'RGB', np.dtype([('R', 'u1'),
                           ('G', 'u1'),
                           ('B', 'u1')]), "NIFTI_TYPE_RGB24"),
    (255, 'all', np.void, ''),
    (256, 'int8', np.int8, "NIFTI_TYPE_INT8"),
    (512, 'uint16', np.uint16, "NIFTI_TYPE_UINT16"),
    (768, 'uint32', np.uint32, "NIFTI_TYPE_UINT32"),
    (1024, 'int64', np.int64, "NIFTI_TYPE_INT64"),
    (1280, 'uint64', np.uint64, "NIFTI_TYPE_UINT64"),
    (1536, 'float128', np.void, "NIFTI_TYPE_FLOAT128"),
    (1792, 'complex128', np.complex128, "NIFTI_TYPE_COMPLEX128"),
    (2048, 'complex256', np.void, "NIFTI_TYPE_COMPLEX256"),
    (2304, 'RGBA', np.dtype([('R', 'u1'),
                             ('G', 'u1'),
                             ('B', 'u1'),
                             ('A', 'u1')]), "NIFTI_TYPE_RGBA32"),
)

# Code table with numpy dtype columns; any code, label, type or dtype is a key
data_type_codes = make_dt_codes(_dtdefs)

# Codes we can never read as fixed width samples
unreadable_type_codes = (data_type_codes.code['none'],
                         data_type_codes.code['binary'])

# Transform (qform, sform) codes
xform_codes = Recoder((  # code, label, niistring
    (0, 'unknown', "NIFTI_XFORM_UNKNOWN"),
    (1, 'scanner', "NIFTI_XFORM_SCANNER_ANAT"),
    (2, 'aligned', "NIFTI_XFORM_ALIGNED_ANAT"),
    (3, 'talairach', "NIFTI_XFORM_TALAIRACH"),
    (4, 'mni', "NIFTI_XFORM_MNI_152")), fields=('code', 'label', 'niistring'))

# unit codes
unit_codes = Recoder((  # code, label
    (0, 'unknown'),
    (1, 'meter'),
    (2, 'mm'),
    (3, 'micron'),
    (8, 'sec'),
    (16, 'msec'),
    (24, 'usec'),
    (32, 'hz'),
    (40, 'ppm'),
    (48, 'rads')), fields=('code', 'label'))

slice_order_codes = Recoder((  # code, label
    (0, 'unknown'),
    (1, 'sequential increasing', 'seq inc'),
    (2, 'sequential decreasing', 'seq dec'),
    (3, 'alternating increasing', 'alt inc'),
    (4, 'alternating decreasing', 'alt dec'),
    (5, 'alternating increasing 2', 'alt inc 2'),
    (6, 'alternating decreasing 2', 'alt dec 2')), fields=('code', 'label'))

intent_codes = Recoder((
    # code, label, parameters description tuple
    (0, 'none', (), "NIFTI_INTENT_NONE"),
    (2, 'correlation', ('p1 = DOF',), "NIFTI_INTENT_CORREL"),
    (3, 't test', ('p1 = DOF',), "NIFTI_INTENT_TTEST"),
    (4, 'f test', ('p1 = numerator DOF', 'p2 = denominator DOF'),
     "NIFTI_INTENT_FTEST"),
    (5, 'z score', (), "NIFTI_INTENT_ZSCORE"),
    (6, 'chi2', ('p1 = DOF',), "NIFTI_INTENT_CHISQ"),
    (7, 'beta', ('p1 = a', 'p2 = b'), "NIFTI_INTENT_BETA"),
    (8, 'binomial',
     ('p1 = number of trials', 'p2 = probability per trial'),
     "NIFTI_INTENT_BINOM"),
    (9, 'gamma', ('p1 = shape', 'p2 = scale'), "NIFTI_INTENT_GAMMA"),
    (10, 'poisson', ('p1 = mean',), "NIFTI_INTENT_POISSON"),
    (11, 'normal', ('p1 = mean', 'p2 = standard deviation'),
     "NIFTI_INTENT_NORMAL"),
    (12, 'non central f test',
     ('p1 = numerator DOF',
      'p2 = denominator DOF',
      'p3 = numerator noncentrality parameter'),
     "NIFTI_INTENT_FTEST_NONC"),
    (13, 'non central chi2',
     ('p1 = DOF', 'p2 = noncentrality parameter'),
     "NIFTI_INTENT_CHISQ_NONC"),
    (14, 'logistic', ('p1 = location', 'p2 = scale'),
     "NIFTI_INTENT_LOGISTIC"),
    (15, 'laplace', ('p1 = location', 'p2 = scale'),
     "NIFTI_INTENT_LAPLACE"),
    (16, 'uniform', ('p1 = lower end', 'p2 = upper end'),
     "NIFTI_INTENT_UNIFORM"),
    (17, 'non central t test',
     ('p1 = DOF', 'p2 = noncentrality parameter'),
     "NIFTI_INTENT_TTEST_NONC"),
    (18, 'weibull', ('p1 = location', 'p2 = scale', 'p3 = power'),
     "NIFTI_INTENT_WEIBULL"),
    (19, 'chi', ('p1 = DOF',), "NIFTI_INTENT_CHI"),
    (20, 'inverse gaussian', ('p1 = mu', 'p2 = lambda'),
     "NIFTI_INTENT_INVGAUSS"),
    (21, 'extreme value 1', ('p1 = location', 'p2 = scale'),
     "NIFTI_INTENT_EXTVAL"),
    (22, 'p value', (), "NIFTI_INTENT_PVAL"),
    (23, 'log p value', (), "NIFTI_INTENT_LOGPVAL"),
    (24, 'log10 p value', (), "NIFTI_INTENT_LOG10PVAL"),
    (1001, 'estimate', (), "NIFTI_INTENT_ESTIMATE"),
    (1002, 'label', (), "NIFTI_INTENT_LABEL"),
    (1003, 'neuroname', (), "NIFTI_INTENT_NEURONAME"),
    (1004, 'general matrix', ('p1 = M', 'p2 = N'), "NIFTI_INTENT_GENMATRIX"),
    (1005, 'symmetric matrix', ('p1 = M',), "NIFTI_INTENT_SYMMATRIX"),
    (1006, 'displacement vector', (), "NIFTI_INTENT_DISPVECT"),
    (1007, 'vector', (), "NIFTI_INTENT_VECTOR"),
    (1008, 'pointset', (), "NIFTI_INTENT_POINTSET"),
    (1009, 'triangle', (), "NIFTI_INTENT_TRIANGLE"),
    (1010, 'quaternion', (), "NIFTI_INTENT_QUATERNION"),
    (1011, 'dimensionless', (), "NIFTI_INTENT_DIMLESS"),
    (2001, 'time series', (), "NIFTI_INTENT_TIME_SERIES",
     "NIFTI_INTENT_TIMESERIES"),  # this mis-spell occurs in the wild
    (2002, 'node index', (), "NIFTI_INTENT_NODE_INDEX"),
    (2003, 'rgb vector', (), "NIFTI_INTENT_RGB_VECTOR"),
    (2004, 'rgba vector', (), "NIFTI_INTENT_RGBA_VECTOR"),
    (2005, 'shape', (), "NIFTI_INTENT_SHAPE"),
), fields=('code', 'label', 'parameters', 'niistring'))


class Nifti1Header(LabeledWrapStruct):
    ''' Class for NIfTI1 single file header

    The header precedes the voxel data in one buffer.  Decoding a buffer
    probes the byte order, decodes the 348 byte record, and checks it (see
    ``_get_checks``).  Only the single file form, with magic ``n+1``, is
    accepted.
    '''
    # Copies of module level definitions
    template_dtype = header_dtype
    _data_type_codes = data_type_codes

    # fields with recoders for their values
    _field_recoders = {'datatype': data_type_codes,
                       'qform_code': xform_codes,
                       'sform_code': xform_codes,
                       'intent_code': intent_codes,
                       'slice_code': slice_order_codes}

    sizeof_hdr = 348

    # Header plus 4 byte extension flag; data cannot start before here
    single_vox_offset = 352

    # Problem level of format invariant failures; these always raise
    fatal_level = 50

    # Magics for single and pair
    pair_magic = b'ni1'
    single_magic = b'n+1'

    @classmethod
    def guessed_endian(klass, binaryblock):
        ''' Probe endianness of ``binaryblock`` from the ``dim[0]`` field

        Read ``dim[0]`` as little endian first; if that is outside 1..7, read
        it as big endian.

        Parameters
        ----------
        binaryblock : bytes-like
           raw header bytes

        Returns
        -------
        endianness : {'<', '>'}

        Raises
        ------
        ByteOrderError
            if ``dim[0]`` is outside 1..7 in both byte orders

        Examples
        --------
        >>> hdr_data = Nifti1Header.default_structarr('>')
        >>> hdr_data['dim'][0] = 3
        >>> Nifti1Header.guessed_endian(hdr_data.tobytes())
        '>'
        '''
        readings = []
        for endianness in ('<', '>'):
            dt = klass.template_dtype.newbyteorder(endianness)
            hdr = np.ndarray(shape=(), dtype=dt, buffer=binaryblock)
            dim0 = int(hdr['dim'][0])
            if 1 <= dim0 <= 7:
                imageglobals.logger.debug('Found byte order %s', endianness)
                return endianness
            readings.append(dim0)
        raise ByteOrderError(
            'Cannot infer byte order of header; dim[0] is not in range '
            '[1, 7] as little endian (%d) or big endian (%d)'
            % tuple(readings),
            'dim', tuple(readings))

    @classmethod
    def default_structarr(klass, endianness=None):
        ''' Return header data for a valid default header with given endianness
        '''
        hdr_data = super().default_structarr(endianness)
        hdr_data['sizeof_hdr'] = klass.sizeof_hdr
        hdr_data['dim'] = 1
        hdr_data['dim'][0] = 0
        hdr_data['pixdim'] = 1
        hdr_data['datatype'] = 16  # float32
        hdr_data['bitpix'] = 32
        hdr_data['vox_offset'] = klass.single_vox_offset
        hdr_data['scl_slope'] = np.nan
        hdr_data['scl_inter'] = np.nan
        hdr_data['magic'] = klass.single_magic
        return hdr_data

    def get_data_dtype(self):
        ''' Get numpy dtype for voxel data, in the header byte order

        Raises
        ------
        DataTypeError
            if the datatype code has no fixed width numpy equivalent

        Examples
        --------
        >>> hdr = Nifti1Header()
        >>> hdr.get_data_dtype() == np.dtype(np.float32)
        True
        '''
        code = int(self._structarr['datatype'])
        try:
            dtype = self._data_type_codes.dtype[code]
        except KeyError:
            raise DataTypeError(f'data code {code} not recognized',
                                'datatype', code)
        if dtype.itemsize == 0:
            raise DataTypeError(f'data code {code} not supported',
                                'datatype', code)
        return dtype.newbyteorder(self.endianness)

    def get_data_shape(self):
        ''' Get shape of data from ``dim[1..dim[0]]``

        >>> Nifti1Header().get_data_shape()
        (0,)
        '''
        dims = self._structarr['dim']
        ndims = int(dims[0])
        if ndims == 0:
            return 0,
        return tuple(int(d) for d in dims[1:ndims + 1])

    def get_zooms(self):
        ''' Get voxel sizes from ``pixdim[1..dim[0]]``

        >>> Nifti1Header().get_zooms()
        (1.0,)
        '''
        hdr = self._structarr
        ndim = int(hdr['dim'][0])
        if ndim == 0:
            return (1.0,)
        return tuple(float(p) for p in hdr['pixdim'][1:ndim + 1])

    def get_data_offset(self):
        ''' Return ``vox_offset`` as stored in the header

        See :func:`niftidecode.voxels.locate_voxels` for the offset used to
        read data.
        '''
        return int(self._structarr['vox_offset'])

    def get_slope_inter(self):
        ''' Return ``(scl_slope, scl_inter)`` as floats, or ``(None, None)``

        A slope of 0, or a slope that is not finite, means the stored values
        are not scaled.

        Raises
        ------
        HeaderDataError
            for a usable slope with an intercept that is not finite

        Examples
        --------
        >>> Nifti1Header().get_slope_inter()
        (None, None)
        '''
        slope = float(self['scl_slope'])
        inter = float(self['scl_inter'])
        if slope == 0 or not np.isfinite(slope):
            return None, None
        if not np.isfinite(inter):
            raise HeaderDataError(
                f'Valid slope but invalid intercept {inter}',
                'scl_inter', inter)
        return slope, inter

    def get_dim_info(self):
        ''' Return data axes for frequency, phase and slice encoding

        ``dim_info`` packs three 2 bit axis numbers, 1-based, with 0 for not
        set.  We return 0-based axis indices, with None for not set.
        '''
        info = int(self._structarr['dim_info'])
        return tuple((info >> shift & 3) - 1 if info >> shift & 3 else None
                     for shift in (0, 2, 4))

    def get_xyzt_codes(self):
        ''' Return spatial and temporal unit codes from ``xyzt_units`` '''
        units = int(self._structarr['xyzt_units'])
        return units & 0x07, units & 0x38

    def get_xyzt_units(self):
        ''' Return spatial and temporal unit labels '''
        return tuple(unit_codes.label.get(code, 'unknown')
                     for code in self.get_xyzt_codes())

    def get_intent(self, code_repr='label'):
        ''' Return intent, its parameters and its name

        Parameters
        ----------
        code_repr : {'label', 'code'}, optional
           return the intent as its label (default) or its integer code

        Returns
        -------
        intent : str or int
        parameters : tuple
            the ``intent_p*`` values the intent uses; all three for unknown
            intent codes
        name : str
            ``intent_name``
        '''
        if code_repr not in ('label', 'code'):
            raise TypeError('repr can be "label" or "code"')
        hdr = self._structarr
        code = int(hdr['intent_code'])
        recoder = self._field_recoders['intent_code']
        n_params = len(recoder.parameters[code]) if code in recoder else 3
        params = tuple(float(hdr[f'intent_p{i}'])
                       for i in range(1, n_params + 1))
        intent = code if code_repr == 'code' else self.get_value_label(
            'intent_code')
        return intent, params, asstr(hdr['intent_name'].item())

    def check(self, logger=None, error_level=None):
        ''' Run header checks; failures at ``fatal_level`` always raise

        The error level in force is lowered to ``fatal_level`` if needed, so
        neither `error_level` nor ``imageglobals.error_level`` can let a
        header with the wrong size, magic or datatype through.
        '''
        if error_level is None:
            error_level = imageglobals.error_level
        return super().check(logger, min(error_level, self.fatal_level))

    ''' Checks only below here '''

    @classmethod
    def _get_checks(klass):
        # The first three are the fatal ones, and run first, so that the
        # error raised for a bad header is always the first of these to fail
        return (klass._chk_sizeof_hdr,
                klass._chk_magic,
                klass._chk_datatype,
                klass._chk_bitpix,
                klass._chk_pixdims,
                klass._chk_qfac,
                klass._chk_offset,
                klass._chk_qform_code,
                klass._chk_sform_code)

    @classmethod
    def _chk_sizeof_hdr(klass, hdr):
        rep = Report(HeaderSizeError)
        sizeof_hdr = int(hdr['sizeof_hdr'])
        if sizeof_hdr == klass.sizeof_hdr:
            return rep
        rep.problem_level = klass.fatal_level
        rep.problem_msg = (f'unsupported header size {sizeof_hdr}; '
                           f'sizeof_hdr should be {klass.sizeof_hdr}')
        rep.field = 'sizeof_hdr'
        rep.value = sizeof_hdr
        return rep

    @classmethod
    def _chk_magic(klass, hdr):
        rep = Report(StorageModeError)
        magic = hdr['magic'].item()
        if magic == klass.single_magic:
            return rep
        rep.problem_level = klass.fatal_level
        rep.field = 'magic'
        rep.value = magic
        if magic == klass.pair_magic:
            rep.problem_msg = ('unsupported storage mode; magic "ni1" is for '
                               'header / image pairs, only single files '
                               '("n+1") are supported')
        else:
            rep.problem_msg = f'magic string {magic!r} is not valid'
        return rep

    @classmethod
    def _chk_datatype(klass, hdr):
        rep = Report(DataTypeError)
        code = int(hdr['datatype'])
        if code in unreadable_type_codes:
            rep.problem_level = klass.fatal_level
            rep.problem_msg = (f'invalid voxel data type; data code {code} '
                               f'({klass._data_type_codes.label[code]}) '
                               'not supported')
        elif code not in klass._data_type_codes.value_set():
            rep.problem_level = 30
            rep.problem_msg = f'data code {code} not recognized'
        else:
            return rep
        rep.field = 'datatype'
        rep.value = code
        return rep

    @classmethod
    def _chk_bitpix(klass, hdr):
        rep = Report(HeaderDataError)
        code = int(hdr['datatype'])
        try:
            dt = klass._data_type_codes.dtype[code]
        except KeyError:
            return rep
        bitpix = dt.itemsize * 8
        if bitpix in (0, hdr['bitpix']):
            return rep
        rep.problem_level = 10
        rep.problem_msg = (f'bitpix {int(hdr["bitpix"])} does not match '
                           f'datatype; expecting {bitpix}')
        rep.field = 'bitpix'
        rep.value = int(hdr['bitpix'])
        return rep

    @staticmethod
    def _chk_pixdims(hdr):
        rep = Report(HeaderDataError)
        spat_dims = hdr['pixdim'][1:4]
        if not np.any(spat_dims <= 0):
            return rep
        pmsgs = []
        if np.any(spat_dims == 0):
            level = 30
            pmsgs.append('pixdim[1,2,3] should be non-zero')
        if np.any(spat_dims < 0):
            level = 35
            pmsgs.append('pixdim[1,2,3] should be positive')
        rep.problem_level = level
        rep.problem_msg = ' and '.join(pmsgs)
        rep.field = 'pixdim'
        rep.value = tuple(float(p) for p in spat_dims)
        return rep

    @staticmethod
    def _chk_qfac(hdr):
        rep = Report(HeaderDataError)
        if hdr['pixdim'][0] in (-1, 1):
            return rep
        rep.problem_level = 20
        rep.problem_msg = 'pixdim[0] (qfac) should be 1 (default) or -1'
        rep.field = 'pixdim'
        rep.value = float(hdr['pixdim'][0])
        return rep

    @classmethod
    def _chk_offset(klass, hdr):
        rep = Report(HeaderDataError)
        offset = float(hdr['vox_offset'])
        if offset < klass.single_vox_offset:
            rep.problem_level = 30
            rep.problem_msg = (f'vox offset {offset:g} too low for single '
                               'file nifti1; reading data from '
                               f'{klass.single_vox_offset}')
        elif offset % 16:
            # SPM memory maps data, and needs 16 byte alignment
            rep.problem_level = 30
            rep.problem_msg = (f'vox offset (={offset:g}) not divisible '
                               'by 16, not SPM compatible')
        else:
            return rep
        rep.field = 'vox_offset'
        rep.value = offset
        return rep

    @classmethod
    def _chk_qform_code(klass, hdr):
        return klass._chk_xform_code('qform_code', hdr)

    @classmethod
    def _chk_sform_code(klass, hdr):
        return klass._chk_xform_code('sform_code', hdr)

    @classmethod
    def _chk_xform_code(klass, code_type, hdr):
        # utility method for sform and qform codes
        rep = Report(HeaderDataError)
        code = int(hdr[code_type])
        recoder = klass._field_recoders[code_type]
        if code in recoder.value_set():
            return rep
        rep.problem_level = 30
        rep.problem_msg = '%s %d not valid' % (code_type, code)
        rep.field = code_type
        rep.value = code
        return rep
