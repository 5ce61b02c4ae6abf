import numpy

from nlpmodels.meta import NLPModelMeta, NLSMeta
from nlpmodels.nls import AbstractNLSModel

class LinearLeastSquares(AbstractNLSModel):
    """
    Linear least-squares problem :math:`\\min \\tfrac{1}{2} \\|A x - b\\|^2`.

    The residual Jacobian is ``A``, stored densely in row-major order, and the
    residual Hessians vanish. The objective Hessian :math:`A^T A` is available
    through the regular Hessian API.

    Parameters
    ----------
    A : array_like
        ``nequ x nvar`` matrix.
    b : array_like
        Right-hand side, of length ``nequ``.
    x0 : array_like, optional
        Initial guess (default: zeros).
    """

    def __init__(self, A, b, x0=None):
        self.A = numpy.atleast_2d(numpy.array(A, dtype=float))
        nequ, nvar = self.A.shape
        self.b = numpy.array(b, dtype=float).reshape(-1)
        if len(self.b) != nequ:
            raise ValueError('LinearLeastSquares() >> ' +
                             'A and b have incompatible shapes!')
        meta = NLPModelMeta(nvar, x0=x0, name='LinearLeastSquares')
        nls_meta = NLSMeta(nequ, nvar, x0=x0, nnzj=nequ*nvar, nnzh=0)
        super(LinearLeastSquares, self).__init__(meta, nls_meta)

    def _residual(self, x, Fx):
        Fx[:] = self.A.dot(x) - self.b

    def _jac_structure_residual(self, rows, cols):
        nequ, nvar = self.A.shape
        rows[:] = numpy.repeat(numpy.arange(nequ), nvar)
        cols[:] = numpy.tile(numpy.arange(nvar), nequ)

    def _jac_coord_residual(self, x, vals):
        vals[:] = self.A.ravel()

    def _jprod_residual(self, x, v, Jv):
        Jv[:] = self.A.dot(v)

    def _jtprod_residual(self, x, v, Jtv):
        Jtv[:] = self.A.T.dot(v)

    def _hess_structure_residual(self, rows, cols):
        pass

    def _hess_coord_residual(self, x, v, vals):
        pass

    def _hess_structure(self, rows, cols):
        rows[:], cols[:] = numpy.tril_indices(self.meta.nvar)

    def _hess_coord(self, x, y, vals, obj_weight):
        rows, cols = numpy.tril_indices(self.meta.nvar)
        vals[:] = obj_weight * self.A.T.dot(self.A)[rows, cols]
