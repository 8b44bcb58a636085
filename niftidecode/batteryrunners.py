# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niftidecode package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Battery runner classes and Report classes

These classes / objects are for checking a decoded header for problems.

Each check is a callable taking the object to check and returning a
``Report``::

   def chk(hdr):
       return Report()

Checks never change the object they look at.  A check reports the problem
level it found, from 0 (no problem) to 50 (the object cannot be used), a
message, and, for header checks, the field and value that caused the
problem.

Here is a check that looks at the ``sizeof_hdr`` field of a header::

   def chk_sizeof_hdr(hdr):
       rep = Report(HeaderSizeError)
       if hdr['sizeof_hdr'] == 348:
           return rep
       rep.problem_level = 50
       rep.problem_msg = 'sizeof_hdr should be 348'
       rep.field = 'sizeof_hdr'
       rep.value = int(hdr['sizeof_hdr'])
       return rep

The ``BatteryRunner`` runs every check, in order, and returns all the
reports.  The caller then decides, with ``Report.log_raise``, which problems
only get logged and which raise.
"""


class BatteryRunner:
    """Runs a fixed sequence of checks over an object"""

    def __init__(self, checks):
        """Store `checks` to run later

        Parameters
        ----------
        checks : sequence
           callables with signature ``rep = chk(obj)``, in the order to run
           them.

        Examples
        --------
        >>> def chk(obj): # minimal check
        ...     return Report()
        >>> btrun = BatteryRunner((chk,))
        """
        self._checks = checks

    def check_only(self, obj):
        """Run checks on `obj` returning reports

        Parameters
        ----------
        obj : anything
           object on which to run checks

        Returns
        -------
        reports : list
           reports from running each check on `obj`, in check order
        """
        return [check(obj) for check in self._checks]

    def log_raise(self, obj, logger, error_level=40):
        """Run checks, log reports, raise first error at or above `error_level`

        All checks run before anything is logged, so the error raised is
        always that of the first failing check in check order.

        Parameters
        ----------
        obj : anything
           object on which to run checks
        logger : log
           log object, implementing ``log`` method
        error_level : int, optional
           problem level at or above which a report raises its error

        Returns
        -------
        reports : list
           reports from running each check on `obj`
        """
        reports = self.check_only(obj)
        for report in reports:
            report.log_raise(logger, error_level)
        return reports

    def __len__(self):
        return len(self._checks)


class Report:
    def __init__(self, error=Exception, problem_level=0, problem_msg='',
                 field=None, value=None):
        """Result of one check

        Parameters
        ----------
        error : Exception class
           class of error to raise for this problem
        problem_level : int
           0 for no problem, up to 50 for a problem that makes the object
           unusable.  Default is 0
        problem_msg : string
           description of the problem.  Default is ''
        field : None or str
           name of the field holding the problem value, if any
        value : object
           problem value found in `field`

        Examples
        --------
        >>> rep = Report()
        >>> rep.problem_level
        0
        >>> rep = Report(TypeError, 10)
        >>> rep.problem_level
        10
        """
        self.error = error
        self.problem_level = problem_level
        self.problem_msg = problem_msg
        self.field = field
        self.value = value

    def __getstate__(self):
        """Tuple of the report values, for comparison"""
        return (self.error, self.problem_level, self.problem_msg,
                self.field, self.value)

    def __eq__(self, other):
        """True if `other` has the same error, level, message, field and value

        >>> rep = Report(problem_level=10)
        >>> rep2 = Report(problem_level=10)
        >>> rep == rep2
        True
        >>> rep3 = Report(problem_level=20)
        >>> rep == rep3
        False
        """
        return self.__getstate__() == other.__getstate__()

    def __ne__(self, other):
        return not self == other

    def __str__(self):
        return str(self.__dict__)

    @property
    def message(self):
        """formatted message string"""
        return self.problem_msg

    def make_error(self):
        """Return error instance for this report

        Errors that know about header fields get the field and value as
        well as the message.
        """
        if self.field is None:
            return self.error(self.problem_msg)
        return self.error(self.problem_msg, self.field, self.value)

    def log_raise(self, logger, error_level=40):
        """Log message at the problem level; raise if level >= `error_level`

        Parameters
        ----------
        logger : logging.Logger
           or other object with a ``log(level, msg)`` method
        error_level : int, optional
           lowest problem level that raises the error
        """
        logger.log(self.problem_level, self.message)
        if self.problem_level and self.problem_level >= error_level:
            if self.error:
                raise self.make_error()

