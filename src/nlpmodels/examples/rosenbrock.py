import numpy

from nlpmodels.meta import NLPModelMeta
from nlpmodels.model import AbstractNLPModel

class Rosenbrock(AbstractNLPModel):
    """
    Extended Rosenbrock function

    .. math::

        f(x) = \\sum_{i=1}^{n-1} 100 (x_{i+1} - x_i^2)^2 + (1 - x_i)^2

    started from :math:`x_0 = (-1.2, 1, -1.2, 1, \\dots)`. The Hessian is
    tridiagonal; its lower triangle is stored as the diagonal followed by the
    subdiagonal.
    """

    def __init__(self, nvar=2):
        if nvar < 2:
            raise ValueError('Rosenbrock() >> Need at least two variables!')
        x0 = numpy.ones(nvar)
        x0[::2] = -1.2
        meta = NLPModelMeta(nvar, x0=x0, nnzh=2*nvar - 1, name='Rosenbrock')
        super(Rosenbrock, self).__init__(meta)

    def _obj(self, x):
        return sum(100.0*(x[1:]-x[:-1]**2.0)**2.0 + (1-x[:-1])**2.0)

    def _grad(self, x, g):
        xm = x[1:-1]
        xm_m1 = x[:-2]
        xm_p1 = x[2:]
        g[1:-1] = 200*(xm-xm_m1**2) - 400*(xm_p1 - xm**2)*xm - 2*(1-xm)
        g[0] = -400*x[0]*(x[1]-x[0]**2) - 2*(1-x[0])
        g[-1] = 200*(x[-1]-x[-2]**2)

    def _hess_structure(self, rows, cols):
        n = self.meta.nvar
        rows[:n] = numpy.arange(n)
        cols[:n] = numpy.arange(n)
        rows[n:] = numpy.arange(1, n)
        cols[n:] = numpy.arange(n - 1)

    def _hess_coord(self, x, y, vals, obj_weight):
        n = self.meta.nvar
        diag = numpy.zeros(n)
        diag[:-1] = 1200*x[:-1]**2 - 400*x[1:] + 2
        diag[1:] += 200
        vals[:n] = obj_weight * diag
        vals[n:] = obj_weight * (-400*x[:-1])
