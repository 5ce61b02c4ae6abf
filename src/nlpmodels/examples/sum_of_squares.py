import numpy

from nlpmodels.meta import NLPModelMeta
from nlpmodels.model import AbstractNLPModel

class SumOfSquares(AbstractNLPModel):
    """
    :math:`f(x) = \\sum_i x_i^2`, unconstrained, started from ones.
    """

    def __init__(self, nvar=3):
        meta = NLPModelMeta(nvar, x0=numpy.ones(nvar), nnzh=nvar,
                            name='SumOfSquares')
        super(SumOfSquares, self).__init__(meta)

    def _obj(self, x):
        return x.dot(x)

    def _grad(self, x, g):
        g[:] = 2.0 * x

    def _hess_structure(self, rows, cols):
        rows[:] = numpy.arange(self.meta.nvar)
        cols[:] = numpy.arange(self.meta.nvar)

    def _hess_coord(self, x, y, vals, obj_weight):
        vals[:] = 2.0 * obj_weight

    def _hprod(self, x, y, v, Hv, obj_weight):
        Hv[:] = 2.0 * obj_weight * v
