import numpy

from nlpmodels.options import get_opt
from nlpmodels.util import EPS

from nlpmodels.linalg.basic import QuasiNewtonApprox

class LimitedMemoryBFGS(QuasiNewtonApprox):
    """ Limited-memory BFGS approximation for the Hessian.

    The approximation stays symmetric positive definite: corrections that do
    not satisfy the curvature condition :math:`s^T y > 0` are skipped.

    Products with the Hessian use the unrolled form

    .. math::

        B v = \\gamma v + \\sum_k (b_k^T v) b_k - (a_k^T v) a_k

    and products with its inverse use the two-loop recursion.

    Parameters
    ----------
    n : int
        Number of variables.
    optns : dict, optional
        In addition to the base options, ``scaling`` (default ``True``)
        replaces the initial diagonal by :math:`y^T y / s^T y` of the most
        recent correction.

    Attributes
    ----------
    scale : float
        Current diagonal :math:`\\gamma` of the initial approximation.
    s_dot_y_list : list of float
        Curvature of each stored correction.
    a_list, b_list : list of numpy.ndarray
        Vectors of the unrolled product.
    """

    def __init__(self, n, optns=None):
        super(LimitedMemoryBFGS, self).__init__(n, optns)

        self.scaling = get_opt(self.optns, True, 'scaling')
        self.scale = self.norm_init
        self.s_dot_y_list = []
        self.a_list = []
        self.b_list = []

    def add_correction(self, s_in, y_in):
        s_in = self._vector(s_in, 's')
        y_in = self._vector(y_in, 'y')
        curvature = s_in.dot(y_in)

        # if curvature is too small, skip correction
        if curvature <= EPS * numpy.linalg.norm(s_in) * \
                numpy.linalg.norm(y_in):
            self._skip('curvature condition')
            return False

        # free up space for the correction, if needed
        if len(self.s_list) == self.max_stored:
            del self.s_dot_y_list[0]
        self._store(s_in, y_in)
        self.s_dot_y_list.append(curvature)

        if self.scaling:
            self.scale = y_in.dot(y_in) / curvature
        self._unroll()
        return True

    def _unroll(self):
        self.a_list = []
        self.b_list = []
        for k in range(len(self.s_list)):
            s_k = self.s_list[k]
            Bs = self.scale * s_k
            for a_i, b_i in zip(self.a_list, self.b_list):
                Bs += b_i.dot(s_k) * b_i - a_i.dot(s_k) * a_i
            self.b_list.append(self.y_list[k] / numpy.sqrt(self.s_dot_y_list[k]))
            self.a_list.append(Bs / numpy.sqrt(s_k.dot(Bs)))

    def product(self, in_vec, out_vec=None):
        in_vec = self._vector(in_vec, 'in_vec')
        self._check_out(out_vec)
        result = self.scale * in_vec
        for a_k, b_k in zip(self.a_list, self.b_list):
            result += b_k.dot(in_vec) * b_k - a_k.dot(in_vec) * a_k
        if out_vec is None:
            return result
        out_vec[:] = result
        return out_vec

    def solve(self, in_vec, out_vec=None):
        in_vec = self._vector(in_vec, 'in_vec')
        self._check_out(out_vec)
        s_list = self.s_list
        y_list = self.y_list
        num_stored = len(s_list)
        rho = numpy.zeros(num_stored)
        alpha = numpy.zeros(num_stored)

        for k in range(num_stored):
            rho[k] = 1.0 / self.s_dot_y_list[k]

        v_vec = in_vec.copy()
        for k in range(num_stored-1, -1, -1):
            alpha[k] = rho[k] * s_list[k].dot(v_vec)
            v_vec -= alpha[k] * y_list[k]

        v_vec /= self.scale

        for k in range(num_stored):
            beta = rho[k] * y_list[k].dot(v_vec)
            v_vec += (alpha[k] - beta) * s_list[k]

        if out_vec is None:
            return v_vec
        out_vec[:] = v_vec
        return out_vec

    def reset(self):
        super(LimitedMemoryBFGS, self).reset()
        self.scale = self.norm_init
        self.s_dot_y_list = []
        self.a_list = []
        self.b_list = []
        return self
