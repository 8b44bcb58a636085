# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niftidecode package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
""" Read-only wrapper for a fixed layout binary record

:class:`WrapStruct` decodes a binary block into a numpy structured scalar,
in a byte order given by the caller or guessed from the block by the
subclass.  It gives:

* read-only mapping access to the record fields (``wrapped['field']``,
  ``keys()``, ``values()``, ``items()``);
* the ``binaryblock``, ``endianness`` and ``structarr`` properties;
* comparison by content, whatever the byte order, and byte swapped copies;
* a battery of checks, run when the record is decoded.

The checks log every problem to ``imageglobals.logger``; the first problem
at or above ``imageglobals.error_level`` raises.  To see the problems in a
block without raising::

   print(WrapStruct.diagnose_binaryblock(binaryblock))

:class:`LabeledWrapStruct` prints coded fields with their labels.

To change a record, edit the array from ``default_structarr`` (or a copy of
``structarr``) and decode its bytes.
"""
import numpy as np

from .volumeutils import (pretty_mapping, endian_codes, native_code,
                          swapped_code)
from . import imageglobals
from .batteryrunners import BatteryRunner
from .errors import WrapStructError


class WrapStruct:
    # placeholder datatype
    template_dtype = np.dtype([('integer', 'i2')])

    def __init__(self,
                 binaryblock=None,
                 endianness=None,
                 check=True):
        """ Decode record from `binaryblock`

        Parameters
        ----------
        binaryblock : {None, bytes-like} optional
            exactly one record of binary data.  None gives the default
            record (see ``default_structarr``).
        endianness : {None, '<','>', other endian code} string, optional
            byte order of `binaryblock`.  None means guess from `binaryblock`
            with ``guessed_endian``, or native for the default record.
        check : bool, optional
            Whether to run the checks on the decoded record.  Default is
            True.

        Examples
        --------
        >>> wstr = WrapStruct()
        >>> wstr['integer']
        array(0, dtype=int16)
        """
        klass = self.__class__
        if binaryblock is None:
            structarr = klass.default_structarr(endianness)
        else:
            size = klass.template_dtype.itemsize
            if len(binaryblock) != size:
                raise WrapStructError(f'Binary block should be {size} bytes, '
                                      f'not {len(binaryblock)}')
            if endianness is None:
                endianness = klass.guessed_endian(binaryblock)
            dt = klass.template_dtype.newbyteorder(endian_codes[endianness])
            structarr = np.ndarray(shape=(), dtype=dt,
                                   buffer=binaryblock).copy()
        structarr.setflags(write=False)
        self._structarr = structarr
        if check:
            self.check()

    @classmethod
    def from_buffer(klass, buffer, endianness=None, check=True):
        """ Decode record from the start of `buffer`

        Parameters
        ----------
        buffer : bytes-like
           Object implementing the buffer protocol.  Bytes after the record
           are ignored.
        endianness : None or endian code, optional
           byte order of the record.  If None, guess.
        check : bool, optional
           Whether to check the decoded record

        Returns
        -------
        wstr : WrapStruct object
        """
        size = klass.template_dtype.itemsize
        block = memoryview(buffer).cast('B')
        if len(block) < size:
            raise WrapStructError(f'Need {size} bytes for record; buffer has '
                                  f'{len(block)}')
        return klass(block[:size], endianness, check)

    @property
    def binaryblock(self):
        """ Record as bytes, in its own byte order

        >>> len(WrapStruct().binaryblock)
        2
        """
        return self._structarr.tobytes()

    @property
    def endianness(self):
        """ Byte order of the record, ``'<'`` or ``'>'`` """
        return native_code if self._structarr.dtype.isnative else swapped_code

    @property
    def structarr(self):
        """ Read-only 0-d structured array holding the record """
        return self._structarr

    def copy(self):
        return self.__class__(self.binaryblock, self.endianness, check=False)

    def __eq__(self, other):
        """ True if `other` holds the same field values

        >>> WrapStruct() == WrapStruct(endianness=swapped_code)
        True
        """
        try:
            other = other.as_byteswapped(self.endianness)
        except AttributeError:
            return False
        return self.binaryblock == other.binaryblock

    def __ne__(self, other):
        return not self == other

    def __getitem__(self, item):
        return self._structarr[item]

    def __iter__(self):
        return iter(self.keys())

    def keys(self):
        """ Return field names in record order """
        return list(self.template_dtype.names)

    def values(self):
        return [self._structarr[key] for key in self.keys()]

    def items(self):
        return zip(self.keys(), self.values())

    def get(self, k, d=None):
        """ Return field `k` if there is one, otherwise `d` """
        return self._structarr[k] if k in self.keys() else d

    def check(self, logger=None, error_level=None):
        """ Run checks, log problems, raise first problem at `error_level`

        Parameters
        ----------
        logger : None or logging.Logger
            Default is ``imageglobals.logger``
        error_level : None or int
            Problems at this level or above raise their error.  Default is
            ``imageglobals.error_level``

        Returns
        -------
        reports : list
            reports from all the checks
        """
        if logger is None:
            logger = imageglobals.logger
        if error_level is None:
            error_level = imageglobals.error_level
        battrun = BatteryRunner(self.__class__._get_checks())
        return battrun.log_raise(self, logger, error_level)

    @classmethod
    def diagnose_binaryblock(klass, binaryblock, endianness=None):
        """ Run checks over `binaryblock`, return problems, one per line """
        wstr = klass(binaryblock, endianness=endianness, check=False)
        reports = BatteryRunner(klass._get_checks()).check_only(wstr)
        return '\n'.join(report.message for report in reports
                         if report.message)

    @classmethod
    def guessed_endian(klass, binaryblock):
        """ Return byte order, ``'<'`` or ``'>'``, of raw `binaryblock`

        Subclasses know which field to look at.
        """
        raise NotImplementedError

    @classmethod
    def default_structarr(klass, endianness=None):
        """ Return writeable 0-d structured array for the default record

        Parameters
        ----------
        endianness : None or endian code, optional
            byte order of returned array.  None means native.
        """
        dt = klass.template_dtype
        if endianness is not None:
            dt = dt.newbyteorder(endian_codes[endianness])
        return np.zeros((), dtype=dt)

    def __str__(self):
        summary = f"{self.__class__} object, endian='{self.endianness}'"
        return '\n'.join([summary, pretty_mapping(self)])

    def as_byteswapped(self, endianness=None):
        """ Return new record with the same values in byte order `endianness`

        Always a new object, even if the byte order does not change.

        Parameters
        ----------
        endianness : None or string, optional
           endian code of the new record.  None means the opposite of the
           current byte order.

        Returns
        -------
        wstr : ``WrapStruct``

        Examples
        --------
        >>> bs_wstr = WrapStruct().as_byteswapped()
        >>> bs_wstr.endianness == swapped_code
        True
        """
        current = self.endianness
        if endianness is None:
            endianness = (swapped_code if current == native_code
                          else native_code)
        else:
            endianness = endian_codes[endianness]
        if endianness == current:
            return self.copy()
        return self.__class__(self._structarr.byteswap().tobytes(),
                              endianness, check=False)

    @classmethod
    def _get_checks(klass):
        """ Return sequence of check functions for this class """
        return ()


class LabeledWrapStruct(WrapStruct):
    """ WrapStruct that shows labels for coded fields """
    # Recoders, with ``label`` field, for coded fields
    _field_recoders = {}

    def get_value_label(self, fieldname):
        """ Return label for value of coded field `fieldname`

        Codes missing from the field's table give ``'<unknown code N>'``.

        Raises
        ------
        ValueError
            if `fieldname` is not a coded field.
        """
        if fieldname not in self._field_recoders:
            raise ValueError(f'{fieldname} not a coded field')
        code = int(self._structarr[fieldname])
        labels = self._field_recoders[fieldname].label
        return labels[code] if code in labels else f'<unknown code {code}>'

    def __str__(self):
        summary = f"{self.__class__} object, endian='{self.endianness}'"

        def _getter(obj, key):
            if key in self._field_recoders:
                return obj.get_value_label(key)
            return obj[key]

        return '\n'.join([summary, pretty_mapping(self, _getter)])
