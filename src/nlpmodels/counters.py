class Counters(object):
    """
    Evaluation counters of a model.

    One non-negative integer is kept per primitive operation. The set of names
    is fixed; every operation on a counter goes through its name.

    Attributes
    ----------
    neval_obj : int
        Objective evaluations.
    neval_grad : int
        Gradient evaluations.
    neval_cons : int
        Constraint evaluations.
    neval_jcon : int
        Evaluations of a single constraint.
    neval_jgrad : int
        Evaluations of the gradient of a single constraint.
    neval_jac : int
        Jacobian evaluations (coordinate or sparse form).
    neval_jprod : int
        Jacobian-vector products.
    neval_jtprod : int
        Transposed Jacobian-vector products.
    neval_hess : int
        Hessian evaluations (coordinate or sparse form).
    neval_hprod : int
        Hessian-vector products.
    neval_jhprod : int
        Products with the Hessian of a single constraint.
    """

    names = (
        'neval_obj', 'neval_grad', 'neval_cons', 'neval_jcon', 'neval_jgrad',
        'neval_jac', 'neval_jprod', 'neval_jtprod', 'neval_hess',
        'neval_hprod', 'neval_jhprod',
    )

    def __init__(self):
        self.reset()

    def _check(self, name):
        if name not in self.names:
            raise KeyError('%s: unknown counter %r' % (
                type(self).__name__, name))

    def increment(self, name):
        self._check(name)
        setattr(self, name, getattr(self, name) + 1)

    def decrement(self, name):
        self._check(name)
        count = getattr(self, name)
        if count == 0:
            raise ValueError('%s.decrement() >> ' % type(self).__name__ +
                             'Counter %s is already zero!' % name)
        setattr(self, name, count - 1)

    def __getitem__(self, name):
        self._check(name)
        return getattr(self, name)

    def sum(self):
        """Sum of all counters."""
        return sum(getattr(self, name) for name in self.names)

    def reset(self):
        """Set every counter back to zero."""
        for name in self.names:
            setattr(self, name, 0)
        return self

    def to_dict(self):
        return dict((name, getattr(self, name)) for name in self.names)

    def __str__(self):
        return '  Counters:\n' + ''.join(
            '%16s: %d\n' % (name[6:], getattr(self, name))
            for name in self.names)

class NLSCounters(Counters):
    """
    Evaluation counters of a nonlinear least-squares model: the counters of
    the underlying optimization problem plus one counter per residual
    primitive.
    """

    names = Counters.names + (
        'neval_residual', 'neval_jac_residual', 'neval_jprod_residual',
        'neval_jtprod_residual', 'neval_hess_residual',
        'neval_jhess_residual', 'neval_hprod_residual',
    )
