# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niftidecode package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
""" Test binary structure objects

Uses a small two field structure, with a byte order guess from the first
field, to test the machinery shared with the NIfTI1 header.
"""
import logging
from io import StringIO

import numpy as np
import pytest

from ..wrapstruct import WrapStruct, LabeledWrapStruct
from ..batteryrunners import Report
from ..errors import WrapStructError, HeaderDataError
from ..volumeutils import swapped_code, native_code, Recoder


class _TestWrapStruct(LabeledWrapStruct):
    """ Structure with a rank field in 1..7 and a coded field """
    template_dtype = np.dtype([('rank', 'i2'), ('code', 'i2'),
                               ('value', 'f4')])
    _field_recoders = {'code': Recoder(((0, 'none'), (1, 'one')),
                                       fields=('code', 'label'))}

    @classmethod
    def guessed_endian(klass, binaryblock):
        dt = klass.template_dtype.newbyteorder('<')
        hdr = np.ndarray(shape=(), dtype=dt, buffer=binaryblock)
        return '<' if 1 <= hdr['rank'] <= 7 else '>'

    @classmethod
    def default_structarr(klass, endianness=None):
        structarr = super().default_structarr(endianness)
        structarr['rank'] = 3
        return structarr

    @classmethod
    def _get_checks(klass):
        return (klass._chk_value,)

    @staticmethod
    def _chk_value(hdr):
        rep = Report(HeaderDataError)
        if hdr['value'] >= 0:
            return rep
        rep.problem_level = 40
        rep.problem_msg = 'value should be positive'
        rep.field = 'value'
        rep.value = float(hdr['value'])
        return rep


def _block(endianness='<', rank=3, code=0, value=0.0):
    structarr = _TestWrapStruct.default_structarr(endianness)
    structarr['rank'] = rank
    structarr['code'] = code
    structarr['value'] = value
    return structarr.tobytes()


def test_base_default():
    wstr = WrapStruct()
    assert wstr.endianness == native_code
    assert wstr['integer'] == 0
    assert len(wstr.binaryblock) == 2
    assert wstr.keys() == ['integer']
    # No guessing for the base class
    with pytest.raises(NotImplementedError):
        WrapStruct(b'\x00\x01')
    # But OK with a given endianness
    wstr = WrapStruct(b'\x00\x01', '>')
    assert wstr['integer'] == 1
    assert wstr.endianness == '>'


def test_wrong_size():
    with pytest.raises(WrapStructError):
        _TestWrapStruct(b'\x00' * 7)
    with pytest.raises(WrapStructError):
        _TestWrapStruct(b'\x00' * 9)
    with pytest.raises(WrapStructError):
        _TestWrapStruct.from_buffer(b'\x00' * 7)


def test_guessed_endian():
    for endianness in ('<', '>'):
        wstr = _TestWrapStruct(_block(endianness, rank=2, value=1.5))
        assert wstr.endianness == endianness
        assert wstr['rank'] == 2
        assert wstr['value'] == 1.5


def test_from_buffer():
    block = _block('>', rank=4, code=1)
    # Trailing bytes ignored
    wstr = _TestWrapStruct.from_buffer(block + b'more data')
    assert wstr['rank'] == 4
    assert wstr.binaryblock == block
    # Any buffer protocol object
    wstr = _TestWrapStruct.from_buffer(bytearray(block))
    assert wstr.binaryblock == block
    arr = np.frombuffer(block + b'\x00' * 4, dtype=np.uint8)
    wstr = _TestWrapStruct.from_buffer(arr)
    assert wstr.binaryblock == block
    # endianness can be forced
    wstr = _TestWrapStruct.from_buffer(block, '>')
    assert wstr['code'] == 1


def test_read_only():
    wstr = _TestWrapStruct(_block())
    with pytest.raises(TypeError):
        wstr['rank'] = 2
    with pytest.raises(ValueError):
        wstr.structarr['rank'] = 2
    with pytest.raises(AttributeError):
        wstr.structarr = None


def test_mappingness():
    wstr = _TestWrapStruct(_block(value=2.0))
    assert wstr.keys() == ['rank', 'code', 'value']
    assert list(wstr) == wstr.keys()
    assert [v for v in wstr.values()] == [3, 0, 2.0]
    assert dict(wstr.items())['value'] == 2.0
    assert wstr.get('rank') == 3
    assert wstr.get('not a field', 'default') == 'default'


def test_eq_byteswap():
    wstr = _TestWrapStruct(_block(value=2.0))
    bs_wstr = wstr.as_byteswapped()
    assert bs_wstr.endianness != wstr.endianness
    assert bs_wstr == wstr
    assert bs_wstr is not wstr
    # binary blocks differ though
    assert bs_wstr.binaryblock != wstr.binaryblock
    # explicit endianness
    assert wstr.as_byteswapped('>').endianness == '>'
    same = wstr.as_byteswapped(wstr.endianness)
    assert same is not wstr
    assert same.binaryblock == wstr.binaryblock
    # copies compare equal
    assert wstr.copy() == wstr
    assert wstr != _TestWrapStruct(_block(value=3.0))
    assert wstr != 'a string'


def test_check_logs_raises():
    block = _block(value=-1.0)
    with pytest.raises(HeaderDataError) as excinfo:
        _TestWrapStruct(block)
    assert excinfo.value.field == 'value'
    assert excinfo.value.value == -1.0
    # Not checked, no error
    wstr = _TestWrapStruct(block, check=False)
    # Higher error level, problem only logged
    str_io = StringIO()
    logger = logging.getLogger('test.logger.wrapstruct')
    logger.setLevel(30)
    logger.addHandler(logging.StreamHandler(str_io))
    reports = wstr.check(logger=logger, error_level=50)
    assert reports[0].problem_level == 40
    assert str_io.getvalue() == 'value should be positive\n'
    assert (_TestWrapStruct.diagnose_binaryblock(block) ==
            'value should be positive')
    assert _TestWrapStruct.diagnose_binaryblock(_block()) == ''


def test_str_labels():
    wstr = _TestWrapStruct(_block(code=1))
    assert wstr.get_value_label('code') == 'one'
    with pytest.raises(ValueError):
        wstr.get_value_label('rank')
    assert 'one' in str(wstr)
    assert "endian='<'" in str(wstr)
    wstr = _TestWrapStruct(_block(code=5))
    assert wstr.get_value_label('code') == '<unknown code 5>'


def test_default_native():
    wstr = _TestWrapStruct()
    assert wstr.endianness == native_code
    wstr = _TestWrapStruct(endianness=swapped_code)
    assert wstr.endianness == swapped_code
    assert wstr['rank'] == 3
