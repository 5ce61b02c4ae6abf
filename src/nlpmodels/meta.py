import numpy as np

from nlpmodels.util import lencheck

def _frozen(vec):
    vec = np.array(vec, dtype=float)
    vec.setflags(write=False)
    return vec

def _classify(lower, upper):
    fixed, low, upp, rng, free = [], [], [], [], []
    for i in range(len(lower)):
        has_low = lower[i] > -np.inf
        has_upp = upper[i] < np.inf
        if has_low and has_upp:
            if lower[i] == upper[i]:
                fixed.append(i)
            else:
                rng.append(i)
        elif has_low:
            low.append(i)
        elif has_upp:
            upp.append(i)
        else:
            free.append(i)
    return tuple(fixed), tuple(low), tuple(upp), tuple(rng), tuple(free)

class NLPModelMeta(object):
    """
    Metadata of a nonlinear optimization problem

    .. math::

        \\min f(x) \\quad \\text{s.t.} \\quad
        c_L \\leq c(x) \\leq c_U, \\quad \\ell \\leq x \\leq u

    The record is created once, together with its model, and never changes
    afterwards. Vectors are stored as read-only numpy arrays.

    Parameters
    ----------
    nvar : int
        Number of variables.
    x0 : array_like, optional
        Initial guess (default: zeros).
    lvar, uvar : array_like, optional
        Bounds on the variables (default: unbounded).
    ncon : int, optional
        Number of general constraints.
    y0 : array_like, optional
        Initial Lagrange multipliers (default: zeros).
    lcon, ucon : array_like, optional
        Bounds on the constraints (default: unbounded).
    nnzj : int, optional
        Number of entries in the sparse Jacobian (default: dense count).
    nnzh : int, optional
        Number of entries in the lower triangle of the sparse Hessian
        (default: dense count).
    lin : iterable of int, optional
        Indices of the linear constraints.
    name : str, optional
        Problem name.
    minimize : bool, optional
        ``True`` for minimization problems.
    """

    def __init__(self, nvar, x0=None, lvar=None, uvar=None, ncon=0, y0=None,
                 lcon=None, ucon=None, nnzj=None, nnzh=None, lin=(),
                 name='Generic', minimize=True):
        if nvar < 0 or ncon < 0:
            raise ValueError('NLPModelMeta() >> ' +
                             'Dimensions must be non-negative!')
        self._nvar = int(nvar)
        self._ncon = int(ncon)

        x0 = np.zeros(nvar) if x0 is None else x0
        lvar = -np.inf * np.ones(nvar) if lvar is None else lvar
        uvar = np.inf * np.ones(nvar) if uvar is None else uvar
        lencheck(nvar, x0, lvar, uvar, names=('x0', 'lvar', 'uvar'))
        y0 = np.zeros(ncon) if y0 is None else y0
        lcon = -np.inf * np.ones(ncon) if lcon is None else lcon
        ucon = np.inf * np.ones(ncon) if ucon is None else ucon
        lencheck(ncon, y0, lcon, ucon, names=('y0', 'lcon', 'ucon'))

        self._x0 = _frozen(x0)
        self._lvar = _frozen(lvar)
        self._uvar = _frozen(uvar)
        self._y0 = _frozen(y0)
        self._lcon = _frozen(lcon)
        self._ucon = _frozen(ucon)

        self._nnzj = nvar * ncon if nnzj is None else int(nnzj)
        self._nnzh = nvar * (nvar + 1) // 2 if nnzh is None else int(nnzh)

        self._lin = tuple(sorted(lin))
        for j in self._lin:
            if j < 0 or j >= ncon:
                raise ValueError('NLPModelMeta() >> ' +
                                 'Invalid linear constraint index %d' % j)
        self._nln = tuple(j for j in range(ncon) if j not in self._lin)

        self._name = name
        self._minimize = minimize

        (self._ifix, self._ilow, self._iupp, self._irng,
         self._ifree) = _classify(self._lvar, self._uvar)
        (self._jfix, self._jlow, self._jupp, self._jrng,
         self._jfree) = _classify(self._lcon, self._ucon)

    nvar = property(lambda self: self._nvar, doc="Number of variables.")
    ncon = property(lambda self: self._ncon, doc="Number of constraints.")
    x0 = property(lambda self: self._x0, doc="Initial guess.")
    lvar = property(lambda self: self._lvar, doc="Lower variable bounds.")
    uvar = property(lambda self: self._uvar, doc="Upper variable bounds.")
    y0 = property(lambda self: self._y0, doc="Initial multipliers.")
    lcon = property(lambda self: self._lcon, doc="Lower constraint bounds.")
    ucon = property(lambda self: self._ucon, doc="Upper constraint bounds.")
    nnzj = property(lambda self: self._nnzj, doc="Jacobian nonzeros.")
    nnzh = property(lambda self: self._nnzh, doc="Hessian nonzeros.")
    lin = property(lambda self: self._lin, doc="Linear constraints.")
    nln = property(lambda self: self._nln, doc="Nonlinear constraints.")
    nlin = property(lambda self: len(self._lin))
    nnln = property(lambda self: len(self._nln))
    name = property(lambda self: self._name)
    minimize = property(lambda self: self._minimize)

    ifix = property(lambda self: self._ifix, doc="Fixed variables.")
    ilow = property(lambda self: self._ilow, doc="Lower-bounded only.")
    iupp = property(lambda self: self._iupp, doc="Upper-bounded only.")
    irng = property(lambda self: self._irng, doc="Range-bounded.")
    ifree = property(lambda self: self._ifree, doc="Free variables.")
    jfix = property(lambda self: self._jfix, doc="Equality constraints.")
    jlow = property(lambda self: self._jlow)
    jupp = property(lambda self: self._jupp)
    jrng = property(lambda self: self._jrng)
    jfree = property(lambda self: self._jfree)

    def __str__(self):
        lines = [
            '  Problem name: %s' % self.name,
            '   All variables: %6d   free: %6d   lower: %6d   upper: %6d'
            '   low/upp: %6d   fixed: %6d' % (
                self.nvar, len(self.ifree), len(self.ilow), len(self.iupp),
                len(self.irng), len(self.ifix)),
            ' All constraints: %6d   free: %6d   lower: %6d   upper: %6d'
            '   low/upp: %6d   fixed: %6d' % (
                self.ncon, len(self.jfree), len(self.jlow), len(self.jupp),
                len(self.jrng), len(self.jfix)),
            '          linear: %6d   nonlinear: %6d' % (self.nlin, self.nnln),
            '            nnzj: %6d   nnzh: %6d' % (self.nnzj, self.nnzh),
        ]
        return '\n'.join(lines) + '\n'

class NLSMeta(object):
    """
    Metadata of the residual :math:`F(x)` of a nonlinear least-squares problem.

    Parameters
    ----------
    nequ : int
        Number of residual equations.
    nvar : int
        Number of variables.
    x0 : array_like, optional
        Initial guess (default: zeros).
    nnzj : int, optional
        Number of entries in the residual Jacobian.
    nnzh : int, optional
        Number of entries in the lower triangle of each residual Hessian.
    """

    def __init__(self, nequ, nvar, x0=None, nnzj=None, nnzh=None):
        if nequ < 0 or nvar < 0:
            raise ValueError('NLSMeta() >> Dimensions must be non-negative!')
        self._nequ = int(nequ)
        self._nvar = int(nvar)
        x0 = np.zeros(nvar) if x0 is None else x0
        lencheck(nvar, x0, names=('x0',))
        self._x0 = _frozen(x0)
        self._nnzj = nequ * nvar if nnzj is None else int(nnzj)
        self._nnzh = nvar * (nvar + 1) // 2 if nnzh is None else int(nnzh)

    nequ = property(lambda self: self._nequ, doc="Number of equations.")
    nvar = property(lambda self: self._nvar, doc="Number of variables.")
    x0 = property(lambda self: self._x0)
    nnzj = property(lambda self: self._nnzj)
    nnzh = property(lambda self: self._nnzh)

    def __str__(self):
        return '  nequ: %6d   nvar: %6d   nnzj: %6d   nnzh: %6d\n' % (
            self.nequ, self.nvar, self.nnzj, self.nnzh)
