import numpy

from nlpmodels.options import get_opt
from nlpmodels.util import EPS

from nlpmodels.linalg.basic import QuasiNewtonApprox

class LimitedMemorySR1(QuasiNewtonApprox):
    """ Limited memory symmetric rank-one update

    The approximation may be indefinite. A correction is skipped when its
    rank-one term is ill-defined, i.e. when

    .. math::

        |s^T (y - B s)| < \\tau \\|s\\| \\|y - B s\\|

    with :math:`\\tau` = ``threshold``.

    Parameters
    ----------
    n : int
        Number of variables.
    optns : dict, optional
        In addition to the base options, ``threshold`` (default 1e-8) and
        ``scaling`` (default ``False``), which replaces the initial diagonal
        by :math:`y^T y / s^T y` of the most recent correction when that
        ratio is positive.

    Attributes
    ----------
    scale : float
        Current diagonal of the initial approximation.
    r_list : list of numpy.ndarray
        Rank-one directions :math:`r_k = y_k - B_{k-1} s_k`.
    denom_list : list of float
        Denominators :math:`r_k^T s_k`; zero for a pair that no longer
        contributes after a change of scale.
    """

    def __init__(self, n, optns=None):
        super(LimitedMemorySR1, self).__init__(n, optns)

        self.threshold = get_opt(self.optns, 1.e-8, 'threshold')
        self.scaling = get_opt(self.optns, False, 'scaling')
        self.scale = self.norm_init
        self.r_list = []
        self.denom_list = []

    def _ill_defined(self, prod, norm_a, norm_b):
        return abs(prod) < self.threshold * norm_a * norm_b or \
            abs(prod) < EPS

    def add_correction(self, s_in, y_in):
        s_in = self._vector(s_in, 's')
        y_in = self._vector(y_in, 'y')

        resid = y_in - self.product(s_in)
        prod = s_in.dot(resid)
        if self._ill_defined(prod, numpy.linalg.norm(s_in),
                             numpy.linalg.norm(resid)):
            self._skip('threshold condition')
            return False

        self._store(s_in, y_in)

        if self.scaling:
            curvature = s_in.dot(y_in)
            if curvature > EPS:
                self.scale = y_in.dot(y_in) / curvature
        self._unroll()
        return True

    def _unroll(self):
        self.r_list = []
        self.denom_list = []
        for s_k, y_k in zip(self.s_list, self.y_list):
            resid = y_k - self.product(s_k)
            denom = s_k.dot(resid)
            if self._ill_defined(denom, numpy.linalg.norm(s_k),
                                 numpy.linalg.norm(resid)):
                resid[:] = 0.0
                denom = 0.0
            self.r_list.append(resid)
            self.denom_list.append(denom)

    def product(self, in_vec, out_vec=None):
        in_vec = self._vector(in_vec, 'in_vec')
        self._check_out(out_vec)
        result = self.scale * in_vec
        for r_k, denom in zip(self.r_list, self.denom_list):
            if denom != 0.0:
                result += (r_k.dot(in_vec) / denom) * r_k
        if out_vec is None:
            return result
        out_vec[:] = result
        return out_vec

    def solve(self, in_vec, out_vec=None):
        in_vec = self._vector(in_vec, 'in_vec')
        self._check_out(out_vec)

        # inverse update: same recursion with the roles of s and y swapped
        z_list = []
        denoms = []

        def apply_inverse(vec):
            result = vec / self.scale
            for z_k, d_k in zip(z_list, denoms):
                result += (z_k.dot(vec) / d_k) * z_k
            return result

        for s_k, y_k in zip(self.s_list, self.y_list):
            z_k = s_k - apply_inverse(y_k)
            d_k = z_k.dot(y_k)
            if self._ill_defined(d_k, numpy.linalg.norm(y_k),
                                 numpy.linalg.norm(z_k)):
                continue
            z_list.append(z_k)
            denoms.append(d_k)

        result = apply_inverse(in_vec)
        if out_vec is None:
            return result
        out_vec[:] = result
        return out_vec

    def reset(self):
        super(LimitedMemorySR1, self).reset()
        self.scale = self.norm_init
        self.r_list = []
        self.denom_list = []
        return self
