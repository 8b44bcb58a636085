# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niftidecode package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
""" Read whole files into memory, optionally in parallel chunks """
import os
from concurrent.futures import ThreadPoolExecutor

from . import imageglobals


def chunk_segments(n_bytes, chunk_size):
    """ Split `n_bytes` into ``(offset, length)`` segments of `chunk_size`

    The last segment holds the remainder.

    >>> chunk_segments(10, 4)
    [(0, 4), (4, 4), (8, 2)]
    >>> chunk_segments(0, 4)
    []
    """
    if chunk_size < 1:
        raise ValueError(f'chunk_size should be >= 1; got {chunk_size}')
    return [(offset, min(chunk_size, n_bytes - offset))
            for offset in range(0, n_bytes, chunk_size)]


def _read_segment(filename, buffer, offset, length):
    """ Read `length` bytes at `offset` of `filename` into `buffer` """
    with open(filename, 'rb') as fobj:
        fobj.seek(offset)
        n_read = fobj.readinto(buffer[offset:offset + length])
    if n_read != length:
        raise OSError(f'Expected {length} bytes at offset {offset} of '
                      f'"{filename}", got {n_read}')
    return n_read


def read_bytes(filename, chunk_size=None, max_workers=None):
    """ Return contents of `filename` as a ``bytearray``

    Parameters
    ----------
    filename : str or path-like
    chunk_size : None or int, optional
        If None, read the file in one go.  Otherwise split the file into
        chunks of this many bytes, and read each chunk with a separate
        worker thread into its own region of one preallocated buffer.
    max_workers : None or int, optional
        maximum number of worker threads for chunked reads.  None gives the
        ``ThreadPoolExecutor`` default.

    Returns
    -------
    contents : bytearray
        file contents
    """
    n_bytes = os.path.getsize(filename)
    buffer = bytearray(n_bytes)
    view = memoryview(buffer)
    if chunk_size is None:
        _read_segment(filename, view, 0, n_bytes)
        return buffer
    segments = chunk_segments(n_bytes, chunk_size)
    imageglobals.logger.debug('Reading %d bytes of "%s" in %d chunks',
                              n_bytes, filename, len(segments))
    # Segments do not overlap, so the workers need no lock
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(_read_segment, filename, view,
                                   offset, length)
                   for offset, length in segments]
        for future in futures:
            future.result()
    return buffer
