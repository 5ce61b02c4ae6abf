import sys

from nlpmodels.linalg import QuasiNewtonApprox
from nlpmodels.linalg import LimitedMemoryBFGS, LimitedMemorySR1
from nlpmodels.model import AbstractNLPModel
from nlpmodels.options import get_opt, BadNLPOption
from nlpmodels.util import lencheck, NotImplementedCapability

class QuasiNewtonModel(AbstractNLPModel):
    """
    Model with a quasi-Newton Hessian approximation.

    Wraps an existing model and presents the same interface. Every primitive
    that does not involve the Hessian is forwarded to the wrapped model with
    the same arguments, so evaluations are counted once, by the wrapped model.
    The Hessian is replaced by a limited-memory quasi-Newton operator that is
    updated through :meth:`push`.

    Parameters
    ----------
    nlp : AbstractNLPModel
        Model to wrap.
    optns : dict, optional
        ``type`` selects the quasi-Newton class (default
        :class:`LimitedMemoryBFGS`); the whole dictionary is handed to its
        constructor.

    Attributes
    ----------
    model : AbstractNLPModel
        Wrapped model.
    op : QuasiNewtonApprox
        Hessian approximation.
    """

    default_type = LimitedMemoryBFGS

    def __init__(self, nlp, optns=None):
        if optns is None:
            optns = {}
        qn_type = get_opt(optns, self.default_type, 'type')
        if not (isinstance(qn_type, type) and
                issubclass(qn_type, QuasiNewtonApprox)):
            raise BadNLPOption(optns, 'type')
        if nlp.meta.nvar <= 0:
            raise ValueError('%s() >> Model must have variables!'
                             % type(self).__name__)
        super(QuasiNewtonModel, self).__init__(nlp.meta)
        self.model = nlp
        self.op = qn_type(nlp.meta.nvar, optns)

    @property
    def counters(self):
        return self.model.counters

    def show_header(self, out_file=sys.stdout):
        out_file.write('%s - A QuasiNewtonModel\n' % type(self).__name__)

    def reset_data(self):
        self.op.reset()
        return self

    def reset(self):
        """
        Discard the quasi-Newton corrections.

        The counters belong to the wrapped model and are reset through it.
        """
        return self.reset_data()

    def push(self, *args, **kwargs):
        """Add a correction pair ``(s, y)`` to the Hessian approximation."""
        self.op.add_correction(*args, **kwargs)
        return self

    # the following methods are not affected by the Hessian approximation

    def obj(self, x):
        return self.model.obj(x)

    def grad(self, x, g=None):
        return self.model.grad(x, g)

    def objgrad(self, x, g=None):
        return self.model.objgrad(x, g)

    def cons(self, x, c=None):
        return self.model.cons(x, c)

    def objcons(self, x, c=None):
        return self.model.objcons(x, c)

    def jth_con(self, x, j):
        return self.model.jth_con(x, j)

    def jth_congrad(self, x, j, g=None):
        return self.model.jth_congrad(x, j, g)

    def jth_sparse_congrad(self, x, j):
        return self.model.jth_sparse_congrad(x, j)

    def jac_structure(self, rows=None, cols=None):
        return self.model.jac_structure(rows, cols)

    def jac_coord(self, x, vals=None):
        return self.model.jac_coord(x, vals)

    def jac(self, x):
        return self.model.jac(x)

    def jprod(self, x, v, Jv=None):
        return self.model.jprod(x, v, Jv)

    def jtprod(self, x, v, Jtv=None):
        return self.model.jtprod(x, v, Jtv)

    def jprod_coord(self, rows, cols, vals, v, Jv=None):
        return self.model.jprod_coord(rows, cols, vals, v, Jv)

    def jtprod_coord(self, rows, cols, vals, v, Jtv=None):
        return self.model.jtprod_coord(rows, cols, vals, v, Jtv)

    def jac_op(self, x, Jv=None, Jtv=None, rows=None, cols=None):
        return self.model.jac_op(x, Jv, Jtv, rows, cols)

    def jac_op_coord(self, rows, cols, vals, Jv=None, Jtv=None):
        return self.model.jac_op_coord(rows, cols, vals, Jv, Jtv)

    # the following methods are affected by the Hessian approximation

    def hess_op(self, x, y=None, Hv=None, obj_weight=1.0, rows=None,
                cols=None):
        """
        Return the quasi-Newton operator itself.

        The approximation does not depend on ``x``; it reflects the
        corrections pushed so far. The lengths of ``x`` and ``y`` are still
        checked.
        """
        self._check_x(x)
        self._check_y(y)
        return self.op

    def hprod(self, x, v, y=None, Hv=None, obj_weight=1.0):
        """Apply the quasi-Newton operator to ``v``."""
        self._check_x(x)
        self._check_y(y)
        lencheck(self.meta.nvar, v, names=('v',))
        if Hv is not None:
            lencheck(self.meta.nvar, Hv, names=('Hv',))
        return self.op.product(v, Hv)

    # not implemented: a quasi-Newton operator has no sparsity pattern

    def hess_structure(self, rows=None, cols=None):
        raise NotImplementedCapability(self, 'hess_structure')

    def hess_coord(self, x, y=None, vals=None, obj_weight=1.0):
        raise NotImplementedCapability(self, 'hess_coord')

    def hess(self, x, y=None, obj_weight=1.0):
        raise NotImplementedCapability(self, 'hess')

    def hprod_coord(self, rows, cols, vals, v, Hv=None):
        raise NotImplementedCapability(self, 'hprod_coord')

    def hess_op_coord(self, rows, cols, vals, Hv=None):
        raise NotImplementedCapability(self, 'hess_op_coord')

    def jth_hprod(self, x, v, j, Hv=None):
        raise NotImplementedCapability(self, 'jth_hprod')

    def ghjvprod(self, x, g, v, gHv=None):
        raise NotImplementedCapability(self, 'ghjvprod')

class LBFGSModel(QuasiNewtonModel):
    """Model with a limited-memory BFGS Hessian approximation."""

    def __init__(self, nlp, optns=None):
        optns = dict(optns or {})
        optns['type'] = LimitedMemoryBFGS
        super(LBFGSModel, self).__init__(nlp, optns)

class LSR1Model(QuasiNewtonModel):
    """Model with a limited-memory SR1 Hessian approximation."""

    def __init__(self, nlp, optns=None):
        optns = dict(optns or {})
        optns['type'] = LimitedMemorySR1
        super(LSR1Model, self).__init__(nlp, optns)
