import sys
from collections import namedtuple

import numpy

from nlpmodels.model import as_vector
from nlpmodels.options import get_opt, get_positive_opt
from nlpmodels.util import EPS, lencheck

Inconsistency = namedtuple(
    'Inconsistency', ['check', 'index', 'expected', 'observed', 'rel_error'])
Inconsistency.__doc__ = """
A derivative value that disagrees with its finite-difference estimate.

``expected`` is the finite-difference estimate (or, for the symmetry test,
the mirrored Hessian entry), ``observed`` the value reported by the model and
``rel_error = |expected - observed| / max(1, |expected|)``.
"""

class DerivativeChecker(object):
    """
    Finite-difference checks of the derivatives reported by a model.

    Every check compares the model's derivative along a set of directions with
    a centered difference of the function it differentiates. Directions are
    the coordinate vectors, or random unit probes when the problem has more
    than ``max_directions`` variables. Mismatches are returned as
    :class:`Inconsistency` records and written to ``out_file``; they are never
    raised.

    A passing check is not a proof of correctness: centered differences carry
    their own truncation and rounding error.

    Parameters
    ----------
    nlp : AbstractNLPModel
        Model to check.
    x : array_like, optional
        Point of evaluation (default: ``nlp.meta.x0``).
    y : array_like, optional
        Lagrange multipliers for the Hessian check (default: ``nlp.meta.y0``).
    optns : dict, optional
        Options; see below.

    Attributes
    ----------
    optns : dict
        Which checks :meth:`solve` runs (``gradient``, ``jacobian``,
        ``hessian``).
    rtol : float
        Relative tolerance (default :math:`\\sqrt{\\epsilon}`).
    step : float
        Relative perturbation of the centered difference (default
        :math:`\\epsilon^{1/3}`).
    max_directions : int
        Largest problem checked along every coordinate direction.
    num_probes : int
        Number of random probes used above ``max_directions``.
    seed : int or None
        Seed of the probe generator.
    out_stream : file
        File stream for the report.
    failures : dict
        Results of the last run of each check (``None`` when untested).
    """
    def __init__(self, nlp, x=None, y=None, optns=None):
        if optns is None:
            optns = {}
        self.nlp = nlp
        meta = nlp.meta

        x = meta.x0 if x is None else x
        lencheck(meta.nvar, x, names=('x',))
        self.x = as_vector(x).copy()
        y = meta.y0 if y is None else y
        lencheck(meta.ncon, y, names=('y',))
        self.y = as_vector(y).copy()

        self.optns = {
            'gradient' : get_opt(optns, True, 'gradient'),
            'jacobian' : get_opt(optns, True, 'jacobian'),
            'hessian'  : get_opt(optns, True, 'hessian'),
        }
        self.rtol = get_positive_opt(optns, numpy.sqrt(EPS), 'rtol')
        self.step = get_positive_opt(optns, EPS**(1./3.), 'step')
        self.max_directions = get_positive_opt(optns, 100, 'max_directions',
                                               integer=True)
        self.num_probes = get_positive_opt(optns, 10, 'num_probes',
                                           integer=True)
        self.seed = get_opt(optns, None, 'seed')
        self.out_stream = get_opt(optns, sys.stdout, 'out_file')

        self.failures = {
            'gradient' : None,
            'jacobian' : None,
            'hessian'  : None,
        }
        self.all_tests = ['gradient', 'jacobian', 'hessian']

    # ------------------------------------------------------------------
    # helpers

    def _directions(self):
        nvar = self.nlp.meta.nvar
        if nvar <= self.max_directions:
            for i in range(nvar):
                d = numpy.zeros(nvar)
                d[i] = 1.0
                yield i, d
        else:
            rng = numpy.random.default_rng(self.seed)
            for k in range(self.num_probes):
                d = rng.standard_normal(nvar)
                d /= numpy.linalg.norm(d)
                yield ('probe', k), d

    def _step_size(self, d):
        return self.step * max(1.0, abs(self.x.dot(d)))

    @staticmethod
    def _rel_error(expected, observed):
        return abs(expected - observed) / max(1.0, abs(expected))

    def _lagrangian_grad(self, x, obj_weight):
        gL = self.nlp.grad(x)
        if obj_weight != 1.0:
            gL *= obj_weight
        if self.nlp.meta.ncon > 0:
            gL += self.nlp.jtprod(x, self.y)
        return gL

    def _write_block(self, title, num_tests, flagged):
        self.out_stream.write(
            '============================================================\n' +
            '%s\n' % title +
            '   FD relative step     : %e\n' % self.step +
            '   relative tolerance   : %e\n' % self.rtol +
            '   values compared      : %d\n' % num_tests +
            '   inconsistencies      : %d\n' % len(flagged)
        )
        for item in flagged:
            self.out_stream.write(
                '   %-20s expected %14.6e   observed %14.6e   ' % (
                    item.index, item.expected, item.observed) +
                'rel. error %9.2e\n' % item.rel_error)

    # ------------------------------------------------------------------
    # checks

    def check_gradient(self):
        """
        Compare the objective gradient with centered differences of the
        objective.

        Returns
        -------
        list of Inconsistency
            One record per direction ``i`` (or ``('probe', k)``) whose
            directional derivative disagrees.
        """
        nlp = self.nlp
        x = self.x
        g = nlp.grad(x)

        flagged = []
        num_tests = 0
        for index, d in self._directions():
            h = self._step_size(d)
            f_plus = nlp.obj(x + h*d)
            f_minus = nlp.obj(x - h*d)
            expected = (f_plus - f_minus)/(2.*h)
            observed = g.dot(d)
            rel_error = self._rel_error(expected, observed)
            num_tests += 1
            if rel_error > self.rtol:
                flagged.append(Inconsistency(
                    'gradient', index, expected, observed, rel_error))

        self.failures['gradient'] = flagged
        self._write_block('Gradient check: grad(x) * d', num_tests, flagged)
        if len(flagged) > 0:
            self.out_stream.write(
                'WARNING: grad() or obj() may be inaccurate!\n')
        return flagged

    def check_jacobian(self):
        """
        Compare Jacobian-vector products with centered differences of the
        constraints.

        Returns
        -------
        list of Inconsistency
            One record per constraint ``i`` and direction ``j`` (index
            ``(i, j)``) that disagrees. Empty for unconstrained problems.
        """
        nlp = self.nlp
        x = self.x
        flagged = []
        num_tests = 0
        if nlp.meta.ncon == 0:
            self.failures['jacobian'] = flagged
            return flagged

        for index, d in self._directions():
            h = self._step_size(d)
            Jd = nlp.jprod(x, d)
            c_plus = nlp.cons(x + h*d)
            c_minus = nlp.cons(x - h*d)
            fd = (c_plus - c_minus)/(2.*h)
            for i in range(nlp.meta.ncon):
                rel_error = self._rel_error(fd[i], Jd[i])
                num_tests += 1
                if rel_error > self.rtol:
                    flagged.append(Inconsistency(
                        'jacobian', (i, index), fd[i], Jd[i], rel_error))

        self.failures['jacobian'] = flagged
        self._write_block('Jacobian check: J(x) * d', num_tests, flagged)
        if len(flagged) > 0:
            self.out_stream.write(
                'WARNING: jprod() or cons() may be inaccurate!\n')
        return flagged

    def check_hessian(self, obj_weight=1.0):
        """
        Check the Lagrangian Hessian for symmetry and against centered
        differences of the Lagrangian gradient.

        Parameters
        ----------
        obj_weight : float, optional
            Objective weight used in the Hessian.

        Returns
        -------
        list of Inconsistency
            Asymmetric pairs are reported with ``check='hessian-symmetry'``
            and index ``(i, j)``, ``i > j``; finite-difference mismatches with
            ``check='hessian'`` and index ``(i, j)`` for entry ``i`` of the
            product with direction ``j``.
        """
        nlp = self.nlp
        x = self.x
        y = self.y
        nvar = nlp.meta.nvar
        flagged = []
        num_tests = 0

        directions = list(self._directions())
        columns = [nlp.hprod(x, d, y, obj_weight=obj_weight)
                   for _, d in directions]

        # symmetry: d_i^T H d_j == d_j^T H d_i
        for a in range(len(directions)):
            for b in range(a):
                expected = directions[a][1].dot(columns[b])
                observed = directions[b][1].dot(columns[a])
                rel_error = self._rel_error(expected, observed)
                num_tests += 1
                if rel_error > self.rtol:
                    flagged.append(Inconsistency(
                        'hessian-symmetry',
                        (directions[a][0], directions[b][0]),
                        expected, observed, rel_error))

        for (index, d), Hd in zip(directions, columns):
            h = self._step_size(d)
            g_plus = self._lagrangian_grad(x + h*d, obj_weight)
            g_minus = self._lagrangian_grad(x - h*d, obj_weight)
            fd = (g_plus - g_minus)/(2.*h)
            for i in range(nvar):
                rel_error = self._rel_error(fd[i], Hd[i])
                num_tests += 1
                if rel_error > self.rtol:
                    flagged.append(Inconsistency(
                        'hessian', (i, index), fd[i], Hd[i], rel_error))

        self.failures['hessian'] = flagged
        self._write_block('Hessian check: H(x, y) * d', num_tests, flagged)
        if len(flagged) > 0:
            self.out_stream.write(
                'WARNING: hprod() or grad() may be inaccurate!\n')
        return flagged

    # ------------------------------------------------------------------
    # driver

    def solve(self):
        """
        Run every enabled check and write the verification report.

        Returns
        -------
        dict
            Inconsistencies of each enabled check, keyed by check name.
        """
        results = {}
        for op_name in self.all_tests:
            if self.optns[op_name]:
                results[op_name] = getattr(self, 'check_' + op_name)()
        self._print_failure_report()
        return results

    def _print_failure_report(self):
        self.out_stream.write(
            '============================================================\n' +
            'Verification Report\n' +
            '------------------------------\n'
        )
        for op_name in self.all_tests:
            if self.failures[op_name] is None:
                result = 'Untested'
            elif len(self.failures[op_name]) > 0:
                result = 'WARNING! Possible errors'
            else:
                result = 'Passed'
            self.out_stream.write(
                ('%s'%op_name).ljust(20).replace(' ', '.') +
                '...%s\n'%result
            )

def gradient_check(nlp, x=None, optns=None):
    """Check the gradient of ``nlp`` at ``x``; see :class:`DerivativeChecker`."""
    return DerivativeChecker(nlp, x=x, optns=optns).check_gradient()

def jacobian_check(nlp, x=None, optns=None):
    """Check the Jacobian of ``nlp`` at ``x``; see :class:`DerivativeChecker`."""
    return DerivativeChecker(nlp, x=x, optns=optns).check_jacobian()

def hessian_check(nlp, x=None, y=None, obj_weight=1.0, optns=None):
    """
    Check the Lagrangian Hessian of ``nlp`` at ``(x, y)``; see
    :class:`DerivativeChecker`.
    """
    return DerivativeChecker(nlp, x=x, y=y, optns=optns).check_hessian(
        obj_weight)
