import io
import unittest

import numpy as np

from nlpmodels.util import DimensionError, NotImplementedCapability
from nlpmodels.examples import Rosenbrock, SumOfSquares, HS6
from nlpmodels.test.dummy_models import DummyModel, CoordModel

class ModelTestCase(unittest.TestCase):

    def test_dimension_mismatch(self):
        '''wrong input length leaves buffer and counters untouched'''
        nlp = SumOfSquares(3)
        g = np.full(3, 7.)
        try:
            nlp.grad(np.array([1., 2.]), g)
        except DimensionError as err:
            self.assertEqual(err.expected, 3)
            self.assertEqual(err.actual, 2)
        else:
            self.fail('DimensionError expected')
        np.testing.assert_array_equal(g, np.full(3, 7.))
        self.assertEqual(nlp.counters.neval_grad, 0)

        self.assertRaises(DimensionError, nlp.grad, np.ones(3), np.empty(2))
        self.assertRaises(DimensionError, nlp.obj, np.ones(4))
        self.assertRaises(DimensionError, nlp.hprod, np.ones(3), np.ones(2))
        self.assertEqual(nlp.counters.sum(), 0)

    def test_evaluations(self):
        '''values, buffers and counters of the basic primitives'''
        nlp = SumOfSquares(3)
        x = np.array([1., 2., 3.])
        self.assertEqual(nlp.obj(x), 14.)
        g = np.empty(3)
        out = nlp.grad(x, g)
        self.assertTrue(out is g)
        np.testing.assert_array_equal(g, [2., 4., 6.])
        f, g = nlp.objgrad([1., 2., 3.])
        self.assertEqual(f, 14.)
        self.assertEqual(nlp.counters.neval_obj, 2)
        self.assertEqual(nlp.counters.neval_grad, 2)
        self.assertEqual(nlp.sum_counters(), 4)
        nlp.reset()
        self.assertEqual(nlp.sum_counters(), 0)

    def test_not_implemented(self):
        '''missing primitives raise NotImplementedCapability'''
        nlp = DummyModel(2, ncon=1)
        x = np.zeros(2)
        self.assertRaises(NotImplementedCapability, nlp.obj, x)
        self.assertRaises(NotImplementedCapability, nlp.grad, x)
        self.assertRaises(NotImplementedCapability, nlp.cons, x)
        self.assertRaises(NotImplementedCapability, nlp.jac, x)
        self.assertRaises(NotImplementedCapability, nlp.jprod, x, x)
        self.assertRaises(NotImplementedCapability, nlp.hess_coord, x)
        self.assertRaises(NotImplementedCapability, nlp.hprod, x, x)
        self.assertRaises(NotImplementedCapability, nlp.jth_hprod, x, x, 0)
        self.assertRaises(NotImplementedCapability, nlp.push, x, x)
        self.assertEqual(nlp.counters.sum(), 0)

    def test_jacobian(self):
        '''Jacobian from the coordinate form'''
        nlp = CoordModel()
        x = np.array([1., 2., 3.])
        J = nlp.dense_jac(x)
        np.testing.assert_array_equal(nlp.cons(x), [5., 6.])
        np.testing.assert_array_equal(nlp.jac(x).toarray(), J)
        self.assertEqual(nlp.counters.neval_jac, 1)

        v = np.array([1., -1., 2.])
        w = np.array([3., -2.])
        np.testing.assert_array_equal(nlp.jprod(x, v), J.dot(v))
        np.testing.assert_array_equal(nlp.jtprod(x, w), J.T.dot(w))
        self.assertEqual(nlp.counters.neval_jprod, 1)
        self.assertEqual(nlp.counters.neval_jtprod, 1)
        self.assertEqual(nlp.counters.neval_jac, 1)

        rows, cols = nlp.jac_structure()
        vals = nlp.jac_coord(x)
        np.testing.assert_array_equal(nlp.jprod_coord(rows, cols, vals, v),
                                      J.dot(v))
        np.testing.assert_array_equal(nlp.jtprod_coord(rows, cols, vals, w),
                                      J.T.dot(w))
        self.assertRaises(DimensionError, nlp.jprod_coord, rows[:2], cols,
                          vals, v)

    def test_jac_op(self):
        '''Jacobian as a linear operator'''
        nlp = CoordModel()
        x = np.array([1., 2., 3.])
        J = nlp.dense_jac(x)
        v = np.array([1., -1., 2.])
        w = np.array([3., -2.])

        op = nlp.jac_op(x)
        self.assertEqual(op.shape, (2, 3))
        np.testing.assert_array_equal(op.dot(v), J.dot(v))
        np.testing.assert_array_equal(op.rmatvec(w), J.T.dot(w))
        self.assertEqual(nlp.counters.neval_jprod, 1)
        self.assertEqual(nlp.counters.neval_jtprod, 1)

        nlp.reset()
        rows, cols = nlp.jac_structure()
        op = nlp.jac_op(x, rows=rows, cols=cols)
        np.testing.assert_array_equal(op.dot(v), J.dot(v))
        np.testing.assert_array_equal(op.rmatvec(w), J.T.dot(w))
        self.assertEqual(nlp.counters.neval_jac, 0)
        self.assertEqual(nlp.counters.neval_jprod, 1)
        self.assertEqual(nlp.counters.neval_jtprod, 1)

    def test_hessian(self):
        '''Hessian from the lower triangle'''
        nlp = CoordModel()
        x = np.array([1., 2., 3.])
        y = np.array([0.5, -2.])
        H = nlp.dense_hess(y, obj_weight=3.)
        np.testing.assert_array_equal(
            nlp.hess(x, y, obj_weight=3.).toarray(), np.tril(H))
        rows, cols = nlp.hess_structure()
        self.assertTrue(np.all(rows >= cols))

        v = np.array([1., 2., -1.])
        np.testing.assert_array_equal(nlp.hprod(x, v, y, obj_weight=3.),
                                      H.dot(v))
        self.assertEqual(nlp.counters.neval_hprod, 1)
        self.assertEqual(nlp.counters.neval_hess, 1)

        # omitted multipliers give the objective Hessian
        np.testing.assert_array_equal(
            nlp.hprod(x, v), nlp.dense_hess(np.zeros(2)).dot(v))

        vals = nlp.hess_coord(x, y, obj_weight=3.)
        np.testing.assert_array_equal(nlp.hprod_coord(rows, cols, vals, v),
                                      H.dot(v))

    def test_hess_op(self):
        '''Hessian as a linear operator'''
        nlp = CoordModel()
        x = np.array([1., 2., 3.])
        y = np.array([0.5, -2.])
        H = nlp.dense_hess(y)
        v = np.array([1., 2., -1.])

        op = nlp.hess_op(x, y)
        self.assertEqual(op.shape, (3, 3))
        np.testing.assert_array_equal(op.dot(v), H.dot(v))
        np.testing.assert_array_equal(op.rmatvec(v), H.dot(v))
        self.assertEqual(nlp.counters.neval_hprod, 2)

        nlp.reset()
        rows, cols = nlp.hess_structure()
        op = nlp.hess_op(x, y, rows=rows, cols=cols)
        np.testing.assert_array_equal(op.dot(v), H.dot(v))
        self.assertEqual(nlp.counters.neval_hess, 0)
        self.assertEqual(nlp.counters.neval_hprod, 1)

        Hv = np.empty(3)
        op = nlp.hess_op_coord(rows, cols, nlp.hess_coord(x, y), Hv)
        self.assertTrue(op.matvec(v) is not None)
        np.testing.assert_array_equal(Hv, H.dot(v))

    def test_constraints(self):
        '''single-constraint primitives of HS6'''
        nlp = HS6()
        x = np.array([2., 3.])
        self.assertEqual(nlp.jth_con(x, 0), -10.)
        np.testing.assert_array_equal(nlp.jth_congrad(x, 0), [-40., 10.])
        sparse = nlp.jth_sparse_congrad(x, 0)
        self.assertEqual(sparse.shape, (1, 2))
        np.testing.assert_array_equal(sparse.toarray(), [[-40., 10.]])
        self.assertEqual(nlp.counters.neval_jcon, 1)
        self.assertEqual(nlp.counters.neval_jgrad, 2)
        self.assertRaises(IndexError, nlp.jth_con, x, 1)

        v = np.array([1., 1.])
        np.testing.assert_array_equal(nlp.jth_hprod(x, v, 0), [-20., 0.])
        np.testing.assert_array_equal(nlp.ghjvprod(x, [2., 0.], v), [-40.])
        self.assertEqual(nlp.counters.neval_jhprod, 2)

        f, c = nlp.objcons(x)
        self.assertEqual(f, 1.)
        np.testing.assert_array_equal(c, [-10.])

        vals = nlp.hess_coord(x, [0.5])
        np.testing.assert_array_equal(vals, [-8.])

    def test_rosenbrock(self):
        '''Rosenbrock values at the solution'''
        nlp = Rosenbrock(2)
        np.testing.assert_array_equal(nlp.meta.x0, [-1.2, 1.])
        x = np.ones(2)
        self.assertEqual(nlp.obj(x), 0.)
        np.testing.assert_array_equal(nlp.grad(x), np.zeros(2))
        np.testing.assert_array_equal(nlp.hess(x).toarray(),
                                      [[802., 0.], [-400., 200.]])
        np.testing.assert_array_equal(nlp.hprod(x, [1., 0.]), [802., -400.])
        self.assertRaises(ValueError, Rosenbrock, 1)

    def test_show(self):
        '''model summary'''
        nlp = HS6()
        nlp.obj(nlp.meta.x0)
        out = io.StringIO()
        nlp.show(out_file=out)
        text = out.getvalue()
        self.assertTrue(text.startswith('HS6 - HS6'))
        self.assertTrue('neval_obj : 1' in text)

if __name__ == "__main__":
    unittest.main()
