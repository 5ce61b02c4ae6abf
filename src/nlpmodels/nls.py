import sys

import numpy as np
from scipy.sparse import coo_matrix
from scipy.sparse.linalg import LinearOperator

from nlpmodels.counters import NLSCounters
from nlpmodels.model import AbstractNLPModel, as_vector
from nlpmodels.util import lencheck, coo_prod, coo_sym_prod
from nlpmodels.util import NotImplementedCapability

class AbstractNLSModel(AbstractNLPModel):
    """
    Base class for nonlinear least-squares models

    .. math::

        \\min \\tfrac{1}{2} \\|F(x)\\|^2

    The residual :math:`F` is described by ``nls_meta``. The residual API
    follows the same discipline as the rest of the model: lengths are checked
    first, then the hook is evaluated and counted. Concrete models implement

    * ``_residual(x, Fx)``
    * ``_jac_structure_residual(rows, cols)``
    * ``_jac_coord_residual(x, vals)``
    * ``_jprod_residual(x, v, Jv)`` and ``_jtprod_residual(x, v, Jtv)``
      (default to the coordinate form)
    * ``_hess_structure_residual(rows, cols)``
    * ``_hess_coord_residual(x, v, vals)``: lower triangle of
      :math:`\\sum_i v_i \\nabla^2 F_i(x)`
    * ``_hprod_residual(x, i, v, Hiv)`` (defaults to the coordinate form)

    The objective and its gradient are derived from the residual.

    Parameters
    ----------
    meta : NLPModelMeta
        Problem metadata.
    nls_meta : NLSMeta
        Residual metadata.
    """

    def __init__(self, meta, nls_meta):
        super(AbstractNLSModel, self).__init__(meta, NLSCounters())
        self.nls_meta = nls_meta

    def show(self, out_file=sys.stdout):
        super(AbstractNLSModel, self).show(out_file)
        out_file.write('  Residual:\n')
        out_file.write(str(self.nls_meta))

    def _check_v_residual(self, v):
        lencheck(self.nls_meta.nequ, v, names=('v',))
        return as_vector(v)

    # ------------------------------------------------------------------
    # residual API

    def residual(self, x, Fx=None):
        """Evaluate :math:`F(x)`, the residual at ``x``."""
        x = self._check_x(x)
        Fx = self._buffer(self.nls_meta.nequ, Fx, 'Fx')
        self._residual(x, Fx)
        self.counters.increment('neval_residual')
        return Fx

    def jac_structure_residual(self, rows=None, cols=None):
        """Return the structure of the residual Jacobian."""
        rows = self._buffer(self.nls_meta.nnzj, rows, 'rows', dtype=int)
        cols = self._buffer(self.nls_meta.nnzj, cols, 'cols', dtype=int)
        self._jac_structure_residual(rows, cols)
        return rows, cols

    def jac_coord_residual(self, x, vals=None):
        """Evaluate the residual Jacobian at ``x`` in coordinate format."""
        x = self._check_x(x)
        vals = self._buffer(self.nls_meta.nnzj, vals, 'vals')
        self._jac_coord_residual(x, vals)
        self.counters.increment('neval_jac_residual')
        return vals

    def jac_residual(self, x):
        """Evaluate the residual Jacobian as a ``nequ x nvar`` sparse matrix."""
        x = self._check_x(x)
        rows, cols = self.jac_structure_residual()
        vals = self.jac_coord_residual(x)
        return coo_matrix((vals, (rows, cols)),
                          shape=(self.nls_meta.nequ, self.meta.nvar))

    def jprod_residual(self, x, v, Jv=None):
        """Evaluate :math:`J_F(x) v`."""
        x = self._check_x(x)
        lencheck(self.meta.nvar, v, names=('v',))
        Jv = self._buffer(self.nls_meta.nequ, Jv, 'Jv')
        self._jprod_residual(x, as_vector(v), Jv)
        self.counters.increment('neval_jprod_residual')
        return Jv

    def jtprod_residual(self, x, v, Jtv=None):
        """Evaluate :math:`J_F(x)^T v`."""
        x = self._check_x(x)
        v = self._check_v_residual(v)
        Jtv = self._buffer(self.meta.nvar, Jtv, 'Jtv')
        self._jtprod_residual(x, v, Jtv)
        self.counters.increment('neval_jtprod_residual')
        return Jtv

    def jac_op_residual(self, x, Jv=None, Jtv=None):
        """Return the residual Jacobian at ``x`` as a linear operator."""
        x = self._check_x(x)
        return LinearOperator(
            (self.nls_meta.nequ, self.meta.nvar), dtype=float,
            matvec=lambda v: self.jprod_residual(x, v, Jv),
            rmatvec=lambda v: self.jtprod_residual(x, v, Jtv))

    def hess_structure_residual(self, rows=None, cols=None):
        """
        Return the structure of the lower triangle of the residual Hessians.
        """
        rows = self._buffer(self.nls_meta.nnzh, rows, 'rows', dtype=int)
        cols = self._buffer(self.nls_meta.nnzh, cols, 'cols', dtype=int)
        self._hess_structure_residual(rows, cols)
        return rows, cols

    def hess_coord_residual(self, x, v, vals=None):
        """
        Evaluate the lower triangle of :math:`\\sum_i v_i \\nabla^2 F_i(x)` in
        coordinate format.
        """
        x = self._check_x(x)
        v = self._check_v_residual(v)
        vals = self._buffer(self.nls_meta.nnzh, vals, 'vals')
        self._hess_coord_residual(x, v, vals)
        self.counters.increment('neval_hess_residual')
        return vals

    def hess_residual(self, x, v):
        """
        Evaluate the lower triangle of :math:`\\sum_i v_i \\nabla^2 F_i(x)` as
        a sparse matrix.
        """
        x = self._check_x(x)
        v = self._check_v_residual(v)
        rows, cols = self.hess_structure_residual()
        vals = self.hess_coord_residual(x, v)
        return coo_matrix((vals, (rows, cols)),
                          shape=(self.meta.nvar, self.meta.nvar))

    def jth_hess_residual(self, x, i):
        """Evaluate the lower triangle of :math:`\\nabla^2 F_i(x)`."""
        x = self._check_x(x)
        if i < 0 or i >= self.nls_meta.nequ:
            raise IndexError('%s: residual index %d out of range [0, %d)' % (
                type(self).__name__, i, self.nls_meta.nequ))
        v = np.zeros(self.nls_meta.nequ)
        v[i] = 1.0
        rows, cols = self.hess_structure_residual()
        vals = np.empty(self.nls_meta.nnzh)
        self._hess_coord_residual(x, v, vals)
        self.counters.increment('neval_jhess_residual')
        return coo_matrix((vals, (rows, cols)),
                          shape=(self.meta.nvar, self.meta.nvar))

    def hprod_residual(self, x, i, v, Hiv=None):
        """Evaluate :math:`\\nabla^2 F_i(x) v`."""
        x = self._check_x(x)
        lencheck(self.meta.nvar, v, names=('v',))
        if i < 0 or i >= self.nls_meta.nequ:
            raise IndexError('%s: residual index %d out of range [0, %d)' % (
                type(self).__name__, i, self.nls_meta.nequ))
        Hiv = self._buffer(self.meta.nvar, Hiv, 'Hiv')
        self._hprod_residual(x, i, as_vector(v), Hiv)
        self.counters.increment('neval_hprod_residual')
        return Hiv

    def hess_op_residual(self, x, i, Hiv=None):
        """Return :math:`\\nabla^2 F_i(x)` as a symmetric linear operator."""
        x = self._check_x(x)

        def prod(v):
            return self.hprod_residual(x, i, v, Hiv)
        return LinearOperator((self.meta.nvar, self.meta.nvar), dtype=float,
                              matvec=prod, rmatvec=prod)

    # ------------------------------------------------------------------
    # objective derived from the residual

    def _obj(self, x):
        Fx = self.residual(x)
        return 0.5 * Fx.dot(Fx)

    def _grad(self, x, g):
        Fx = self.residual(x)
        self.jtprod_residual(x, Fx, g)

    # ------------------------------------------------------------------
    # evaluation hooks

    def _residual(self, x, Fx):
        raise NotImplementedCapability(self, 'residual')

    def _jac_structure_residual(self, rows, cols):
        raise NotImplementedCapability(self, 'jac_structure_residual')

    def _jac_coord_residual(self, x, vals):
        raise NotImplementedCapability(self, 'jac_coord_residual')

    def _jprod_residual(self, x, v, Jv):
        rows, cols = self.jac_structure_residual()
        vals = np.empty(self.nls_meta.nnzj)
        self._jac_coord_residual(x, vals)
        coo_prod(rows, cols, vals, v, Jv)

    def _jtprod_residual(self, x, v, Jtv):
        rows, cols = self.jac_structure_residual()
        vals = np.empty(self.nls_meta.nnzj)
        self._jac_coord_residual(x, vals)
        coo_prod(cols, rows, vals, v, Jtv)

    def _hess_structure_residual(self, rows, cols):
        raise NotImplementedCapability(self, 'hess_structure_residual')

    def _hess_coord_residual(self, x, v, vals):
        raise NotImplementedCapability(self, 'hess_coord_residual')

    def _hprod_residual(self, x, i, v, Hiv):
        rows, cols = self.hess_structure_residual()
        vals = np.empty(self.nls_meta.nnzh)
        weights = np.zeros(self.nls_meta.nequ)
        weights[i] = 1.0
        self._hess_coord_residual(x, weights, vals)
        coo_sym_prod(rows, cols, vals, v, Hiv)
