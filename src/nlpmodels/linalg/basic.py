import sys

import numpy as np
from scipy.sparse.linalg import LinearOperator

from nlpmodels.options import get_opt, get_positive_opt
from nlpmodels.util import lencheck

class QuasiNewtonApprox(LinearOperator):
    """ Base class for limited-memory quasi-Newton approximations of the Hessian

    The approximation is a symmetric ``n x n`` linear operator: ``B * v``,
    ``B.dot(v)`` and ``B.T * v`` all apply it without forming a matrix.
    It is built from the initial matrix ``init_hessian * I`` and the most
    recent correction pairs, at most ``max_stored`` of them.

    Parameters
    ----------
    n : int
        Number of variables.
    optns : dict, optional
        ``max_stored`` (default 5), ``init_hessian`` (default 1.0) and
        ``out_file`` (default ``sys.stdout``), plus the options of the
        concrete update.

    Attributes
    ----------
    max_stored : int
        Maximum number of corrections stored.
    norm_init : float
        Diagonal of the initial Hessian approximation.
    s_list : list of numpy.ndarray
        Difference between subsequent solutions: :math:`s_k = x_{k+1} - x_k`
    y_list : list of numpy.ndarray
        Difference between subsequent gradients: :math:`y_k = g_{k+1} - g_k`
    out_file : file
        File stream for data output.
    """

    def __init__(self, n, optns=None):
        if optns is None:
            optns = {}
        if not isinstance(optns, dict):
            raise TypeError('Invalid options! Must be a dictionary.')
        if n <= 0:
            raise ValueError('%s() >> Number of variables must be positive!'
                             % type(self).__name__)
        super(QuasiNewtonApprox, self).__init__(dtype=np.float64,
                                                shape=(n, n))
        self.n = n
        self.optns = optns
        self.out_file = get_opt(optns, sys.stdout, 'out_file')

        self.max_stored = get_positive_opt(optns, 5, 'max_stored',
                                           integer=True)
        self.norm_init = get_positive_opt(optns, 1.0, 'init_hessian')

        self.s_list = []
        self.y_list = []

    @property
    def num_stored(self):
        return len(self.s_list)

    def _vector(self, vec, name):
        lencheck(self.n, vec, names=(name,))
        return np.asarray(vec, dtype=float).reshape(-1)

    def _check_out(self, out_vec):
        if out_vec is not None:
            lencheck(self.n, out_vec, names=('out_vec',))

    def _store(self, s_new, y_new):
        # if maximum is reached, remove old elements
        if len(self.s_list) == self.max_stored:
            del self.s_list[0], self.y_list[0]
        self.s_list.append(s_new.copy())
        self.y_list.append(y_new.copy())

    def _skip(self, reason):
        self.out_file.write('%s.add_correction(): ' % type(self).__name__ +
                            'correction skipped due to %s.\n' % reason)

    def add_correction(self, s_new, y_new):
        """
        Adds a new correction to the Hessian approximation.

        Parameters
        ----------
        s_new : array_like
            Difference between subsequent solutions.
        y_new : array_like
            Difference between subsequent gradients.

        Returns
        -------
        bool
            ``False`` when the correction was skipped.
        """
        raise NotImplementedError # pragma: no cover

    def product(self, in_vec, out_vec=None):
        """
        Applies the approximate Hessian to the input vector.

        Parameters
        ----------
        in_vec : array_like
            Vector that gets multiplied with the Hessian.
        out_vec : numpy.ndarray, optional
            Vector that stores the result of the operation.

        Returns
        -------
        numpy.ndarray
        """
        raise NotImplementedError # pragma: no cover

    def solve(self, in_vec, out_vec=None):
        """
        Applies the inverse of the approximate Hessian to the input vector.

        Parameters
        ----------
        in_vec : array_like
            Vector that gets multiplied with the inverse Hessian.
        out_vec : numpy.ndarray, optional
            Vector that stores the result of the operation.

        Returns
        -------
        numpy.ndarray
        """
        raise NotImplementedError # pragma: no cover

    def reset(self):
        """Discard all stored corrections."""
        del self.s_list[:], self.y_list[:]
        return self

    def _matvec(self, x):
        return self.product(x)

    def _rmatvec(self, x):
        return self.product(x)

    def _adjoint(self):
        return self

    def _transpose(self):
        return self

    def __repr__(self):
        return '<%dx%d %s with %d of %d corrections>' % (
            self.n, self.n, type(self).__name__, self.num_stored,
            self.max_stored)
