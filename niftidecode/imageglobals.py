# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niftidecode package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Defaults for header checking and logging

error_level is the problem level (see batteryrunners) at which an error will be
raised when checking a header.  The fatal header problems report at level 50,
and raise whatever the error level; the diagnostic checks report at lower
levels and only log unless you lower ``error_level``.

``logger`` is the package logger.  It only has a ``NullHandler``; attach your
own handler, or configure logging in your application, to see the messages::

    import logging
    logging.basicConfig(level=logging.DEBUG)
"""
import logging

error_level = 40
logger = logging.getLogger('niftidecode.global')
logger.addHandler(logging.NullHandler())


class ErrorLevel:
    """Context manager setting ``error_level`` inside the ``with`` block"""

    def __init__(self, level):
        self.level = level

    def __enter__(self):
        global error_level
        self._saved_level, error_level = error_level, self.level
        return self

    def __exit__(self, *exc_info):
        global error_level
        error_level = self._saved_level
