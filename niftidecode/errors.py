# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niftidecode package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
""" Errors raised while decoding NIfTI1 buffers

Every error is terminal for the buffer being decoded.  Header errors record
the offending header ``field`` and the ``value`` observed there, so the
cause can be reported without decoding again.
"""


class NiftiDecodeError(Exception):
    """ Base class for all decoding errors """


class WrapStructError(NiftiDecodeError):
    """ Binary block cannot hold the structure """


class HeaderDataError(NiftiDecodeError):
    """ Header field has a value we cannot accept

    Parameters
    ----------
    msg : str
        description of the problem
    field : None or str, optional
        name of the header field holding the bad value
    value : object, optional
        value found in `field`
    """

    def __init__(self, msg, field=None, value=None):
        super().__init__(msg)
        self.field = field
        self.value = value


class ByteOrderError(HeaderDataError):
    """ ``dim[0]`` is implausible under both byte orders """


class HeaderSizeError(HeaderDataError):
    """ ``sizeof_hdr`` is not 348 """


class StorageModeError(HeaderDataError):
    """ magic is not the single file ``n+1`` magic """


class DataTypeError(HeaderDataError):
    """ voxel datatype cannot be read as fixed width samples """


class ImageDataError(NiftiDecodeError):
    """ Voxel data cannot be located in the buffer """


class TruncatedDataError(ImageDataError):
    """ Buffer ends before the voxel data does

    Parameters
    ----------
    msg : str
        description of the problem
    offset : int
        byte offset of the voxel data
    length : int
        expected byte length of the voxel data
    buffer_size : int
        number of bytes in the buffer
    """

    def __init__(self, msg, offset, length, buffer_size):
        super().__init__(msg)
        self.offset = offset
        self.length = length
        self.buffer_size = buffer_size
