from nlpmodels.meta import NLPModelMeta
from nlpmodels.model import AbstractNLPModel

class HS6(AbstractNLPModel):
    """
    Problem 6 of the Hock-Schittkowski collection

    .. math::

        \\min (1 - x_1)^2 \\quad \\text{s.t.} \\quad 10 (x_2 - x_1^2) = 0

    started from :math:`(-1.2, 1)`. The solution is :math:`(1, 1)`.
    """

    def __init__(self):
        meta = NLPModelMeta(2, x0=[-1.2, 1.0], ncon=1, lcon=[0.0],
                            ucon=[0.0], nnzj=2, nnzh=1, name='HS6')
        super(HS6, self).__init__(meta)

    def _obj(self, x):
        return (1.0 - x[0])**2

    def _grad(self, x, g):
        g[0] = 2.0*(x[0] - 1.0)
        g[1] = 0.0

    def _cons(self, x, c):
        c[0] = 10.0*(x[1] - x[0]**2)

    def _jth_con(self, x, j):
        return 10.0*(x[1] - x[0]**2)

    def _jth_congrad(self, x, j, g):
        g[0] = -20.0*x[0]
        g[1] = 10.0

    def _jac_structure(self, rows, cols):
        rows[:] = [0, 0]
        cols[:] = [0, 1]

    def _jac_coord(self, x, vals):
        vals[:] = [-20.0*x[0], 10.0]

    def _jprod(self, x, v, Jv):
        Jv[0] = -20.0*x[0]*v[0] + 10.0*v[1]

    def _jtprod(self, x, v, Jtv):
        Jtv[0] = -20.0*x[0]*v[0]
        Jtv[1] = 10.0*v[0]

    # only the (0, 0) entry of either Hessian is nonzero

    def _jth_hprod(self, x, v, j, Hv):
        Hv[0] = -20.0*v[0]
        Hv[1] = 0.0

    def _ghjvprod(self, x, g, v, gHv):
        gHv[0] = -20.0*g[0]*v[0]

    def _hess_structure(self, rows, cols):
        rows[0] = 0
        cols[0] = 0

    def _hess_coord(self, x, y, vals, obj_weight):
        vals[0] = 2.0*obj_weight - 20.0*y[0]

    def _hprod(self, x, y, v, Hv, obj_weight):
        Hv[0] = (2.0*obj_weight - 20.0*y[0])*v[0]
        Hv[1] = 0.0
