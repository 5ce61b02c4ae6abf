import sys

import numpy as np
from scipy.sparse import coo_matrix
from scipy.sparse.linalg import LinearOperator

from nlpmodels.counters import Counters
from nlpmodels.options import print_dict
from nlpmodels.util import lencheck, coo_prod, coo_sym_prod
from nlpmodels.util import NotImplementedCapability

def as_vector(vec):
    return np.asarray(vec, dtype=float).reshape(-1)

class AbstractNLPModel(object):
    """
    Base class for nonlinear optimization models

    .. math::

        \\min f(x) \\quad \\text{s.t.} \\quad
        c_L \\leq c(x) \\leq c_U, \\quad \\ell \\leq x \\leq u

    This class defines the calling convention shared by every model. The
    public methods check the length of their vector arguments against the
    metadata, allocate the result when no output buffer is provided, evaluate
    the corresponding protected hook and count the evaluation once the hook
    has returned. Concrete models only implement the hooks they can provide:

    ====================================  ===============================
    hook                                  used by
    ====================================  ===============================
    ``_obj(x)``                           ``obj``
    ``_grad(x, g)``                       ``grad``
    ``_cons(x, c)``                       ``cons``
    ``_jth_con(x, j)``                    ``jth_con``
    ``_jth_congrad(x, j, g)``             ``jth_congrad``
    ``_jac_structure(rows, cols)``        ``jac_structure``
    ``_jac_coord(x, vals)``               ``jac_coord``
    ``_jprod(x, v, Jv)``                  ``jprod``
    ``_jtprod(x, v, Jtv)``                ``jtprod``
    ``_jth_hprod(x, v, j, Hv)``           ``jth_hprod``
    ``_ghjvprod(x, g, v, gHv)``           ``ghjvprod``
    ``_hess_structure(rows, cols)``       ``hess_structure``
    ``_hess_coord(x, y, vals, w)``        ``hess_coord``
    ``_hprod(x, y, v, Hv, w)``            ``hprod``
    ====================================  ===============================

    Hooks fill the output buffer they receive. A hook that is not provided
    raises :class:`NotImplementedCapability`. The product hooks default to the
    coordinate form of the Jacobian and Hessian.

    Indices in coordinate formats are 0-based and the Hessian coordinate
    format stores the lower triangle only.

    Parameters
    ----------
    meta : NLPModelMeta
        Problem metadata.
    counters : Counters, optional
        Evaluation counters (a fresh set by default).

    Attributes
    ----------
    meta : NLPModelMeta
        Problem metadata.
    counters : Counters
        Evaluation counters.
    """

    def __init__(self, meta, counters=None):
        self.meta = meta
        self._counters = Counters() if counters is None else counters

    @property
    def counters(self):
        return self._counters

    # ------------------------------------------------------------------
    # bookkeeping

    def reset_data(self):
        """
        Reset model data, if appropriate.

        Models holding data that should be reset, such as a quasi-Newton
        operator, override this method. Counters are not affected.
        """
        return self

    def reset(self):
        """Reset the evaluation counters and the model data."""
        self.counters.reset()
        self.reset_data()
        return self

    def sum_counters(self):
        return self.counters.sum()

    def show_header(self, out_file=sys.stdout):
        out_file.write('%s - %s\n' % (type(self).__name__, self.meta.name))

    def show(self, out_file=sys.stdout):
        """
        Write a summary of the model (metadata and counters) to ``out_file``.
        """
        self.show_header(out_file)
        out_file.write(str(self.meta))
        out_file.write('  Counters:\n')
        print_dict(self.counters.to_dict(), pre='    ', out_file=out_file)

    # ------------------------------------------------------------------
    # helpers

    def _check_x(self, x):
        lencheck(self.meta.nvar, x, names=('x',))
        return as_vector(x)

    def _check_y(self, y):
        if y is None:
            return np.zeros(self.meta.ncon)
        lencheck(self.meta.ncon, y, names=('y',))
        return as_vector(y)

    def _check_index(self, j):
        if j < 0 or j >= self.meta.ncon:
            raise IndexError('%s: constraint index %d out of range [0, %d)' % (
                type(self).__name__, j, self.meta.ncon))

    @staticmethod
    def _buffer(n, out, name, dtype=float):
        if out is None:
            return np.empty(n, dtype=dtype)
        lencheck(n, out, names=(name,))
        return out

    def _check_coord(self, nnz, rows, cols, vals=None):
        lencheck(nnz, rows, cols, names=('rows', 'cols'))
        if vals is not None:
            lencheck(nnz, vals, names=('vals',))

    # ------------------------------------------------------------------
    # objective and constraints

    def obj(self, x):
        """
        Evaluate :math:`f(x)`, the objective function at ``x``.

        Parameters
        ----------
        x : array_like
            Point of evaluation, of length ``nvar``.

        Returns
        -------
        float
        """
        x = self._check_x(x)
        f = self._obj(x)
        self.counters.increment('neval_obj')
        return f

    def grad(self, x, g=None):
        """
        Evaluate :math:`\\nabla f(x)`, the gradient of the objective at ``x``.

        Parameters
        ----------
        x : array_like
            Point of evaluation, of length ``nvar``.
        g : numpy.ndarray, optional
            Preallocated storage for the result.

        Returns
        -------
        numpy.ndarray
            The gradient (``g`` when it is provided).
        """
        x = self._check_x(x)
        g = self._buffer(self.meta.nvar, g, 'g')
        self._grad(x, g)
        self.counters.increment('neval_grad')
        return g

    def objgrad(self, x, g=None):
        """Evaluate :math:`f(x)` and :math:`\\nabla f(x)` at ``x``."""
        x = self._check_x(x)
        g = self._buffer(self.meta.nvar, g, 'g')
        f = self.obj(x)
        self.grad(x, g)
        return f, g

    def cons(self, x, c=None):
        """
        Evaluate :math:`c(x)`, the constraints at ``x``.

        Parameters
        ----------
        x : array_like
            Point of evaluation, of length ``nvar``.
        c : numpy.ndarray, optional
            Preallocated storage for the result, of length ``ncon``.

        Returns
        -------
        numpy.ndarray
        """
        x = self._check_x(x)
        c = self._buffer(self.meta.ncon, c, 'c')
        self._cons(x, c)
        self.counters.increment('neval_cons')
        return c

    def objcons(self, x, c=None):
        """Evaluate :math:`f(x)` and :math:`c(x)` at ``x``."""
        x = self._check_x(x)
        c = self._buffer(self.meta.ncon, c, 'c')
        f = self.obj(x)
        if self.meta.ncon > 0:
            self.cons(x, c)
        return f, c

    def jth_con(self, x, j):
        """Evaluate :math:`c_j(x)`, the ``j``-th constraint at ``x``."""
        x = self._check_x(x)
        self._check_index(j)
        cj = self._jth_con(x, j)
        self.counters.increment('neval_jcon')
        return cj

    def jth_congrad(self, x, j, g=None):
        """Evaluate :math:`\\nabla c_j(x)` at ``x``."""
        x = self._check_x(x)
        self._check_index(j)
        g = self._buffer(self.meta.nvar, g, 'g')
        self._jth_congrad(x, j, g)
        self.counters.increment('neval_jgrad')
        return g

    def jth_sparse_congrad(self, x, j):
        """
        Evaluate :math:`\\nabla c_j(x)` at ``x`` as a sparse ``1 x nvar``
        matrix.
        """
        x = self._check_x(x)
        self._check_index(j)
        g = np.empty(self.meta.nvar)
        self._jth_congrad(x, j, g)
        self.counters.increment('neval_jgrad')
        idx = np.flatnonzero(g)
        return coo_matrix((g[idx], (np.zeros(len(idx), dtype=int), idx)),
                          shape=(1, self.meta.nvar))

    # ------------------------------------------------------------------
    # constraint Jacobian

    def jac_structure(self, rows=None, cols=None):
        """
        Return the structure of the constraint Jacobian in sparse coordinate
        format.

        Returns
        -------
        rows, cols : numpy.ndarray of int
            Row and column indices, of length ``nnzj``.
        """
        rows = self._buffer(self.meta.nnzj, rows, 'rows', dtype=int)
        cols = self._buffer(self.meta.nnzj, cols, 'cols', dtype=int)
        self._jac_structure(rows, cols)
        return rows, cols

    def jac_coord(self, x, vals=None):
        """
        Evaluate :math:`J(x)`, the constraint Jacobian at ``x``, in sparse
        coordinate format.

        Returns
        -------
        numpy.ndarray
            Jacobian values, of length ``nnzj``, ordered as in
            :meth:`jac_structure`.
        """
        x = self._check_x(x)
        vals = self._buffer(self.meta.nnzj, vals, 'vals')
        self._jac_coord(x, vals)
        self.counters.increment('neval_jac')
        return vals

    def jac(self, x):
        """
        Evaluate :math:`J(x)` as a ``ncon x nvar`` sparse matrix.

        Returns
        -------
        scipy.sparse.coo_matrix
        """
        x = self._check_x(x)
        rows, cols = self.jac_structure()
        vals = self.jac_coord(x)
        return coo_matrix((vals, (rows, cols)),
                          shape=(self.meta.ncon, self.meta.nvar))

    def jprod(self, x, v, Jv=None):
        """
        Evaluate :math:`J(x)v`, the Jacobian-vector product at ``x``.

        Parameters
        ----------
        x : array_like
            Point of evaluation, of length ``nvar``.
        v : array_like
            Multiplying vector, of length ``nvar``.
        Jv : numpy.ndarray, optional
            Preallocated storage for the result, of length ``ncon``.

        Returns
        -------
        numpy.ndarray
        """
        x = self._check_x(x)
        lencheck(self.meta.nvar, v, names=('v',))
        Jv = self._buffer(self.meta.ncon, Jv, 'Jv')
        self._jprod(x, as_vector(v), Jv)
        self.counters.increment('neval_jprod')
        return Jv

    def jtprod(self, x, v, Jtv=None):
        """
        Evaluate :math:`J(x)^Tv`, the transposed-Jacobian-vector product at
        ``x``.

        Parameters
        ----------
        x : array_like
            Point of evaluation, of length ``nvar``.
        v : array_like
            Multiplying vector, of length ``ncon``.
        Jtv : numpy.ndarray, optional
            Preallocated storage for the result, of length ``nvar``.

        Returns
        -------
        numpy.ndarray
        """
        x = self._check_x(x)
        lencheck(self.meta.ncon, v, names=('v',))
        Jtv = self._buffer(self.meta.nvar, Jtv, 'Jtv')
        self._jtprod(x, as_vector(v), Jtv)
        self.counters.increment('neval_jtprod')
        return Jtv

    def jprod_coord(self, rows, cols, vals, v, Jv=None):
        """
        Evaluate :math:`J v` where the Jacobian is given by
        ``(rows, cols, vals)`` in coordinate format.
        """
        self._check_coord(self.meta.nnzj, rows, cols, vals)
        lencheck(self.meta.nvar, v, names=('v',))
        Jv = self._buffer(self.meta.ncon, Jv, 'Jv')
        coo_prod(rows, cols, vals, as_vector(v), Jv)
        self.counters.increment('neval_jprod')
        return Jv

    def jtprod_coord(self, rows, cols, vals, v, Jtv=None):
        """
        Evaluate :math:`J^T v` where the Jacobian is given by
        ``(rows, cols, vals)`` in coordinate format.
        """
        self._check_coord(self.meta.nnzj, rows, cols, vals)
        lencheck(self.meta.ncon, v, names=('v',))
        Jtv = self._buffer(self.meta.nvar, Jtv, 'Jtv')
        coo_prod(cols, rows, vals, as_vector(v), Jtv)
        self.counters.increment('neval_jtprod')
        return Jtv

    def jac_op(self, x, Jv=None, Jtv=None, rows=None, cols=None):
        """
        Return the Jacobian at ``x`` as a linear operator.

        The result may be used as if it were a matrix, e.g., ``J * v`` or
        ``J.T * w``. Each product is evaluated on demand and counted as a
        Jacobian-vector product.

        Parameters
        ----------
        x : array_like
            Point of linearization.
        Jv, Jtv : numpy.ndarray, optional
            Preallocated storage for the products; every product then returns
            the same buffer.
        rows, cols : array_like of int, optional
            Jacobian structure. When given, the Jacobian values are computed
            once and the products use the coordinate format.

        Returns
        -------
        scipy.sparse.linalg.LinearOperator
            Operator of shape ``(ncon, nvar)``.
        """
        x = self._check_x(x)
        if Jv is not None:
            lencheck(self.meta.ncon, Jv, names=('Jv',))
        if Jtv is not None:
            lencheck(self.meta.nvar, Jtv, names=('Jtv',))
        if rows is not None or cols is not None:
            self._check_coord(self.meta.nnzj, rows, cols)
            vals = np.empty(self.meta.nnzj)
            self._jac_coord(x, vals)
            return self.jac_op_coord(rows, cols, vals, Jv, Jtv)
        return LinearOperator(
            (self.meta.ncon, self.meta.nvar), dtype=float,
            matvec=lambda v: self.jprod(x, v, Jv),
            rmatvec=lambda v: self.jtprod(x, v, Jtv))

    def jac_op_coord(self, rows, cols, vals, Jv=None, Jtv=None):
        """
        Return the Jacobian given by ``(rows, cols, vals)`` as a linear
        operator.
        """
        self._check_coord(self.meta.nnzj, rows, cols, vals)
        rows = np.asarray(rows, dtype=int)
        cols = np.asarray(cols, dtype=int)
        vals = as_vector(vals)
        return LinearOperator(
            (self.meta.ncon, self.meta.nvar), dtype=float,
            matvec=lambda v: self.jprod_coord(rows, cols, vals, v, Jv),
            rmatvec=lambda v: self.jtprod_coord(rows, cols, vals, v, Jtv))

    # ------------------------------------------------------------------
    # Hessians

    def jth_hprod(self, x, v, j, Hv=None):
        """Evaluate :math:`\\nabla^2 c_j(x) v`."""
        x = self._check_x(x)
        lencheck(self.meta.nvar, v, names=('v',))
        self._check_index(j)
        Hv = self._buffer(self.meta.nvar, Hv, 'Hv')
        self._jth_hprod(x, as_vector(v), j, Hv)
        self.counters.increment('neval_jhprod')
        return Hv

    def ghjvprod(self, x, g, v, gHv=None):
        """
        Evaluate :math:`g^T \\nabla^2 c_i(x) v` for every constraint ``i``.
        """
        x = self._check_x(x)
        lencheck(self.meta.nvar, g, v, names=('g', 'v'))
        gHv = self._buffer(self.meta.ncon, gHv, 'gHv')
        self._ghjvprod(x, as_vector(g), as_vector(v), gHv)
        self.counters.increment('neval_jhprod')
        return gHv

    def hess_structure(self, rows=None, cols=None):
        """
        Return the structure of the lower triangle of the Lagrangian Hessian
        in sparse coordinate format.
        """
        rows = self._buffer(self.meta.nnzh, rows, 'rows', dtype=int)
        cols = self._buffer(self.meta.nnzh, cols, 'cols', dtype=int)
        self._hess_structure(rows, cols)
        return rows, cols

    def hess_coord(self, x, y=None, vals=None, obj_weight=1.0):
        """
        Evaluate the lower triangle of the Lagrangian Hessian

        .. math::

            \\nabla^2 L(x, y) = \\sigma \\nabla^2 f(x) +
                \\sum_i y_i \\nabla^2 c_i(x)

        in sparse coordinate format, with :math:`\\sigma` = ``obj_weight``.

        Parameters
        ----------
        x : array_like
            Point of evaluation.
        y : array_like, optional
            Lagrange multipliers; omitted multipliers give the objective
            Hessian.
        vals : numpy.ndarray, optional
            Preallocated storage, of length ``nnzh``.
        obj_weight : float, optional
            Objective weight.

        Returns
        -------
        numpy.ndarray
        """
        x = self._check_x(x)
        y = self._check_y(y)
        vals = self._buffer(self.meta.nnzh, vals, 'vals')
        self._hess_coord(x, y, vals, obj_weight)
        self.counters.increment('neval_hess')
        return vals

    def hess(self, x, y=None, obj_weight=1.0):
        """
        Evaluate the lower triangle of the Lagrangian Hessian as a sparse
        ``nvar x nvar`` matrix.

        Returns
        -------
        scipy.sparse.coo_matrix
        """
        x = self._check_x(x)
        y = self._check_y(y)
        rows, cols = self.hess_structure()
        vals = self.hess_coord(x, y, obj_weight=obj_weight)
        return coo_matrix((vals, (rows, cols)),
                          shape=(self.meta.nvar, self.meta.nvar))

    def hprod(self, x, v, y=None, Hv=None, obj_weight=1.0):
        """
        Evaluate the product of the Lagrangian Hessian at ``(x, y)`` with
        ``v``. Omitted multipliers give the objective Hessian.

        Parameters
        ----------
        x : array_like
            Point of evaluation.
        v : array_like
            Multiplying vector.
        y : array_like, optional
            Lagrange multipliers.
        Hv : numpy.ndarray, optional
            Preallocated storage for the result.
        obj_weight : float, optional
            Objective weight.

        Returns
        -------
        numpy.ndarray
        """
        x = self._check_x(x)
        lencheck(self.meta.nvar, v, names=('v',))
        y = self._check_y(y)
        Hv = self._buffer(self.meta.nvar, Hv, 'Hv')
        self._hprod(x, y, as_vector(v), Hv, obj_weight)
        self.counters.increment('neval_hprod')
        return Hv

    def hprod_coord(self, rows, cols, vals, v, Hv=None):
        """
        Evaluate the product of the symmetric matrix whose lower triangle is
        ``(rows, cols, vals)`` with ``v``.
        """
        self._check_coord(self.meta.nnzh, rows, cols, vals)
        lencheck(self.meta.nvar, v, names=('v',))
        Hv = self._buffer(self.meta.nvar, Hv, 'Hv')
        coo_sym_prod(rows, cols, vals, as_vector(v), Hv)
        self.counters.increment('neval_hprod')
        return Hv

    def hess_op(self, x, y=None, Hv=None, obj_weight=1.0, rows=None,
                cols=None):
        """
        Return the Lagrangian Hessian at ``(x, y)`` as a symmetric linear
        operator.

        Parameters
        ----------
        x : array_like
            Point of linearization.
        y : array_like, optional
            Lagrange multipliers.
        Hv : numpy.ndarray, optional
            Preallocated storage for the products.
        obj_weight : float, optional
            Objective weight.
        rows, cols : array_like of int, optional
            Hessian structure. When given, the Hessian values are computed
            once and the products use the coordinate format.

        Returns
        -------
        scipy.sparse.linalg.LinearOperator
            Operator of shape ``(nvar, nvar)``.
        """
        x = self._check_x(x)
        y = self._check_y(y)
        if Hv is not None:
            lencheck(self.meta.nvar, Hv, names=('Hv',))
        if rows is not None or cols is not None:
            self._check_coord(self.meta.nnzh, rows, cols)
            vals = np.empty(self.meta.nnzh)
            self._hess_coord(x, y, vals, obj_weight)
            return self.hess_op_coord(rows, cols, vals, Hv)

        def prod(v):
            return self.hprod(x, v, y, Hv, obj_weight=obj_weight)
        return LinearOperator((self.meta.nvar, self.meta.nvar), dtype=float,
                              matvec=prod, rmatvec=prod)

    def hess_op_coord(self, rows, cols, vals, Hv=None):
        """
        Return the symmetric matrix whose lower triangle is
        ``(rows, cols, vals)`` as a linear operator.
        """
        self._check_coord(self.meta.nnzh, rows, cols, vals)
        rows = np.asarray(rows, dtype=int)
        cols = np.asarray(cols, dtype=int)
        vals = as_vector(vals)

        def prod(v):
            return self.hprod_coord(rows, cols, vals, v, Hv)
        return LinearOperator((self.meta.nvar, self.meta.nvar), dtype=float,
                              matvec=prod, rmatvec=prod)

    def push(self, *args, **kwargs):
        """Update the model with new data (e.g. a quasi-Newton pair)."""
        raise NotImplementedCapability(self, 'push')

    # ------------------------------------------------------------------
    # evaluation hooks

    def _obj(self, x):
        raise NotImplementedCapability(self, 'obj')

    def _grad(self, x, g):
        raise NotImplementedCapability(self, 'grad')

    def _cons(self, x, c):
        raise NotImplementedCapability(self, 'cons')

    def _jth_con(self, x, j):
        raise NotImplementedCapability(self, 'jth_con')

    def _jth_congrad(self, x, j, g):
        raise NotImplementedCapability(self, 'jth_congrad')

    def _jac_structure(self, rows, cols):
        raise NotImplementedCapability(self, 'jac_structure')

    def _jac_coord(self, x, vals):
        raise NotImplementedCapability(self, 'jac_coord')

    def _jprod(self, x, v, Jv):
        rows, cols = self.jac_structure()
        vals = np.empty(self.meta.nnzj)
        self._jac_coord(x, vals)
        coo_prod(rows, cols, vals, v, Jv)

    def _jtprod(self, x, v, Jtv):
        rows, cols = self.jac_structure()
        vals = np.empty(self.meta.nnzj)
        self._jac_coord(x, vals)
        coo_prod(cols, rows, vals, v, Jtv)

    def _jth_hprod(self, x, v, j, Hv):
        raise NotImplementedCapability(self, 'jth_hprod')

    def _ghjvprod(self, x, g, v, gHv):
        raise NotImplementedCapability(self, 'ghjvprod')

    def _hess_structure(self, rows, cols):
        raise NotImplementedCapability(self, 'hess_structure')

    def _hess_coord(self, x, y, vals, obj_weight):
        raise NotImplementedCapability(self, 'hess_coord')

    def _hprod(self, x, y, v, Hv, obj_weight):
        rows, cols = self.hess_structure()
        vals = np.empty(self.meta.nnzh)
        self._hess_coord(x, y, vals, obj_weight)
        coo_sym_prod(rows, cols, vals, v, Hv)
