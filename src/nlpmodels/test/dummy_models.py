import numpy

from nlpmodels.meta import NLPModelMeta, NLSMeta
from nlpmodels.model import AbstractNLPModel
from nlpmodels.nls import AbstractNLSModel
from nlpmodels.examples import SumOfSquares, HS6

class DummyModel(AbstractNLPModel):
    """Model that provides no primitive at all."""

    def __init__(self, nvar=2, ncon=0):
        super(DummyModel, self).__init__(
            NLPModelMeta(nvar, ncon=ncon, name='Dummy'))

class DummyNLSModel(AbstractNLSModel):

    def __init__(self, nequ=2, nvar=2):
        super(DummyNLSModel, self).__init__(
            NLPModelMeta(nvar, name='DummyNLS'), NLSMeta(nequ, nvar))

class CoordModel(AbstractNLPModel):
    """
    f(x) = x0*x1 + x2^2,  c(x) = [x0 + 2*x1, x1*x2]

    Only the coordinate forms of the derivatives are provided, so every
    product goes through the default hooks.
    """

    def __init__(self):
        meta = NLPModelMeta(3, x0=[1., 2., 3.], ncon=2, nnzj=4, nnzh=3,
                            lin=[0], name='Coord')
        super(CoordModel, self).__init__(meta)

    def _obj(self, x):
        return x[0]*x[1] + x[2]**2

    def _grad(self, x, g):
        g[:] = [x[1], x[0], 2.*x[2]]

    def _cons(self, x, c):
        c[:] = [x[0] + 2.*x[1], x[1]*x[2]]

    def _jac_structure(self, rows, cols):
        rows[:] = [0, 0, 1, 1]
        cols[:] = [0, 1, 1, 2]

    def _jac_coord(self, x, vals):
        vals[:] = [1., 2., x[2], x[1]]

    def _hess_structure(self, rows, cols):
        rows[:] = [1, 2, 2]
        cols[:] = [0, 1, 2]

    def _hess_coord(self, x, y, vals, obj_weight):
        vals[:] = [obj_weight, y[1], 2.*obj_weight]

    @staticmethod
    def dense_jac(x):
        return numpy.array([[1., 2., 0.],
                            [0., x[2], x[1]]])

    @staticmethod
    def dense_hess(y, obj_weight=1.0):
        return numpy.array([[0., obj_weight, 0.],
                            [obj_weight, 0., y[1]],
                            [0., y[1], 2.*obj_weight]])

class BadGradient(SumOfSquares):
    """Sum of squares whose gradient is off by ``offset`` in one entry."""

    def __init__(self, nvar=3, index=1, offset=1.e-3):
        super(BadGradient, self).__init__(nvar)
        self.index = index
        self.offset = offset

    def _grad(self, x, g):
        super(BadGradient, self)._grad(x, g)
        g[self.index] += self.offset

class BadJacobian(HS6):
    """HS6 with a wrong derivative of the constraint in x[1]."""

    def _jprod(self, x, v, Jv):
        Jv[0] = -20.0*x[0]*v[0] + 11.0*v[1]

class AsymmetricHessian(SumOfSquares):
    """Sum of squares whose Hessian products are not symmetric."""

    def _hprod(self, x, y, v, Hv, obj_weight):
        Hv[:] = 2.0*v
        Hv[0] += v[1]
