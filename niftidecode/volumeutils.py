# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niftidecode package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
""" Code tables, endian codes and scaling for NIfTI1 data """

import sys
from operator import getitem

import numpy as np

native_code = '<' if sys.byteorder == 'little' else '>'
swapped_code = '>' if native_code == '<' else '<'


class Recoder:
    """ Look up one column of a code table from any value in a row

    Each row of `codes` holds one value per name in `fields`, then any
    aliases.  Every value in a row is a key giving that row's value in each
    field.

    >>> units = Recoder(((2, 'mm', 'millimeter'), (8, 'sec')),
    ...                 fields=('code', 'label'))
    >>> units.code['millimeter']
    2
    >>> units.label[8]
    'sec'
    >>> units['mm']  # indexing the table gives the first field
    2
    """

    def __init__(self, codes, fields=('code',), map_maker=dict):
        """ Create recoder object

        Parameters
        ----------
        codes : sequence of sequences
            Each sequence defines values (codes) that are equivalent
        fields : {('code',) string sequence}, optional
            names by which elements in sequences can be accessed
        map_maker: callable, optional
            constructor for the mapping for each field.  Default is ``dict``.
        """
        fields = tuple(fields)
        if len(set(fields)) != len(fields):
            raise KeyError(f'Field names {fields} are not unique')
        columns = [map_maker() for _ in fields]
        for row in codes:
            for key in row:
                for column, value in zip(columns, row):
                    column[key] = value
        for name, column in zip(fields, columns):
            setattr(self, name, column)
        self.fields = fields
        self.field1 = columns[0]

    def __getitem__(self, key):
        return self.field1[key]

    def __contains__(self, key):
        return key in self.field1

    def keys(self):
        """ Return all available code and alias values """
        return self.field1.keys()

    def value_set(self, name=None):
        """ Return set of values in field `name`, default the first field

        >>> codes = ((1, 'one'), (2, 'two'), (1, 'repeat value'))
        >>> Recoder(codes).value_set() == {1, 2}
        True
        """
        column = self.field1 if name is None else getattr(self, name)
        return set(column.values())


endian_codes = Recoder((  # numpy code, aliases
    ('<', 'little', 'l', 'le', 'LE'),
    ('>', 'big', 'b', 'be', 'BE'),
    (native_code, 'native', 'n', '=', '|'),
    (swapped_code, 'swapped', 's', '!')))


class DtypeMapper(dict):
    """ Dict that also finds numpy dtype keys by equality

    Dtypes can compare equal but hash differently, so when a dtype key is
    missing we compare it against the stored dtype keys.
    """

    def __missing__(self, key):
        stored = self._equal_key(key)
        if stored is None:
            raise KeyError(key)
        return dict.__getitem__(self, stored)

    def __contains__(self, key):
        return dict.__contains__(self, key) or self._equal_key(key) is not None

    def _equal_key(self, key):
        if not isinstance(key, np.dtype):
            return None
        for stored in self:
            if isinstance(stored, np.dtype) and stored == key:
                return stored
        return None


def pretty_mapping(mapping, getterfunc=None):
    """ Return one ``key : value`` line per key of `mapping`

    Keys are padded to the longest key.  ``getterfunc(mapping, key)`` gives
    the value to print; the default is ``mapping[key]``.

    >>> print(pretty_mapping({'dim': 3, 'magic': b'n+1'}))
    dim    : 3
    magic  : b'n+1'
    """
    if getterfunc is None:
        getterfunc = getitem
    keys = list(mapping)
    width = max(len(str(key)) for key in keys)
    return '\n'.join(f'{str(key):<{width}}  : {getterfunc(mapping, key)}'
                     for key in keys)


def asstr(bytestr):
    """ Decode null padded byte string field to str """
    return bytestr.split(b'\x00', 1)[0].decode('latin-1')


def make_dt_codes(codes_seqs):
    """ Make data type code table from (code, label, numpy type) rows

    Parameters
    ----------
    codes_seqs : sequence of sequences
       rows of data type code, label, and numpy type (such as
       ``np.float32``), optionally followed by the NIfTI1 name of the code
       (e.g. "NIFTI_TYPE_FLOAT32").  All rows must have the same length.

    Returns
    -------
    rec : ``Recoder`` instance
       table with fields ``code, label, type, [niistring,] dtype,
       sw_dtype``.  The numpy dtype and the byte swapped dtype of each row
       are also keys for that row.
    """
    row_len = len(codes_seqs[0])
    if row_len not in (3, 4):
        raise ValueError('Rows should be (code, label, type) with optional '
                         'niistring')
    fields = ('code', 'label', 'type', 'niistring')[:row_len]
    rows = []
    for row in codes_seqs:
        if len(row) != row_len:
            raise ValueError('Rows must all have the same length')
        dtype = np.dtype(row[2])
        rows.append(tuple(row) + (dtype, dtype.newbyteorder(swapped_code)))
    return Recoder(rows, fields + ('dtype', 'sw_dtype'), DtypeMapper)


def apply_read_scaling(arr, slope=None, inter=None):
    """ Apply scaling in `slope` and `inter` to array `arr`

    Return data will be ``arr * slope + inter``.  Integer data is upcast to a
    floating point type wide enough to hold the integer range before scaling.

    Parameters
    ----------
    arr : array-like
    slope : None or float, optional
        slope value to apply to `arr` (``arr * slope + inter``).  None
        corresponds to a value of 1.0.  A slope of 0 is the NIfTI signal for
        "no scaling"; the intercept is then ignored as well.
    inter : None or float, optional
        intercept value to apply to `arr` (``arr * slope + inter``).  None
        corresponds to a value of 0.0

    Returns
    -------
    ret : array
        array with scaling applied.  If scaling is default (1, 0), or `slope`
        is 0, then ``ret is arr``.

    Examples
    --------
    >>> apply_read_scaling(np.array([-3], dtype=np.int16), 2.0, 1.0)
    array([-5.], dtype=float32)
    >>> arr = np.arange(3, dtype=np.int16)
    >>> apply_read_scaling(arr, 0, 10) is arr
    True
    """
    if slope == 0:
        return arr
    if slope is None:
        slope = 1.0
    if inter is None:
        inter = 0.0
    if (slope, inter) == (1, 0):
        return arr
    arr = np.asanyarray(arr)
    if arr.dtype.kind in 'iub':
        # int to float; float32 holds int8 and int16 exactly, wider ints
        # need float64
        arr = arr.astype(np.result_type(arr.dtype, np.float32))
    if slope != 1.0:
        arr = arr * arr.dtype.type(slope)
    if inter != 0.0:
        arr = arr + arr.dtype.type(inter)
    return arr
