import io
import unittest

import numpy as np

from nlpmodels.qnmodel import QuasiNewtonModel, LBFGSModel, LSR1Model
from nlpmodels.linalg import LimitedMemoryBFGS, LimitedMemorySR1
from nlpmodels.options import BadNLPOption
from nlpmodels.util import DimensionError, NotImplementedCapability
from nlpmodels.examples import Rosenbrock, SumOfSquares, HS6
from nlpmodels.test.dummy_models import DummyModel

class QuasiNewtonModelTestCase(unittest.TestCase):

    def assertRelError(self, vec1, vec2, atol=1e-12):
        self.assertTrue(np.linalg.norm(vec1 - vec2) < atol)

    def test_no_quasi_newton(self):
        '''QuasiNewtonModel error messages'''
        optns = {'type': 25}
        try:
            QuasiNewtonModel(SumOfSquares(2), optns)
        except BadNLPOption as err:
            self.assertEqual(str(err), "Invalid option: optns['type'] = 25")
        else:
            self.fail('BadNLPOption expected')

        optns = {'type': None}
        self.assertRaises(BadNLPOption, QuasiNewtonModel, SumOfSquares(2),
                          optns)

        try:
            QuasiNewtonModel(SumOfSquares(2), {'type': LimitedMemorySR1})
            QuasiNewtonModel(SumOfSquares(2))
        except Exception:
            self.fail('No Error Expected')

        self.assertRaises(ValueError, LBFGSModel, DummyModel(0))

    def test_operator_type(self):
        '''operator selection and options'''
        nlp = QuasiNewtonModel(SumOfSquares(2))
        self.assertTrue(isinstance(nlp.op, LimitedMemoryBFGS))
        nlp = LSR1Model(SumOfSquares(2), {'max_stored': 2})
        self.assertTrue(isinstance(nlp.op, LimitedMemorySR1))
        self.assertEqual(nlp.op.max_stored, 2)
        nlp = LBFGSModel(SumOfSquares(2), {'type': LimitedMemorySR1})
        self.assertTrue(isinstance(nlp.op, LimitedMemoryBFGS))

    def test_forwarding(self):
        '''non-Hessian primitives match the wrapped model'''
        x = np.array([0.5, -0.3])
        ref = Rosenbrock(2)
        model = Rosenbrock(2)
        nlp = LBFGSModel(model)
        self.assertTrue(nlp.meta is model.meta)
        self.assertTrue(nlp.counters is model.counters)

        self.assertEqual(nlp.obj(x), ref.obj(x))
        np.testing.assert_array_equal(nlp.grad(x), ref.grad(x))
        f, g = nlp.objgrad(x)
        f_ref, g_ref = ref.objgrad(x)
        self.assertEqual(f, f_ref)
        np.testing.assert_array_equal(g, g_ref)
        self.assertEqual(model.counters.to_dict(), ref.counters.to_dict())

    def test_constrained_forwarding(self):
        '''constraint primitives match the wrapped model'''
        x = np.array([2., 3.])
        v = np.array([1., -1.])
        ref = HS6()
        nlp = LSR1Model(HS6())
        np.testing.assert_array_equal(nlp.cons(x), ref.cons(x))
        np.testing.assert_array_equal(nlp.jac(x).toarray(),
                                      ref.jac(x).toarray())
        np.testing.assert_array_equal(nlp.jprod(x, v), ref.jprod(x, v))
        np.testing.assert_array_equal(nlp.jtprod(x, [2.]), ref.jtprod(x, [2.]))
        self.assertEqual(nlp.jth_con(x, 0), ref.jth_con(x, 0))
        np.testing.assert_array_equal(nlp.jth_congrad(x, 0),
                                      ref.jth_congrad(x, 0))
        np.testing.assert_array_equal(nlp.jac_op(x).dot(v),
                                      ref.jac_op(x).dot(v))
        self.assertEqual(nlp.counters.to_dict(), ref.counters.to_dict())

    def test_two_pairs(self):
        '''Hessian products use the pushed corrections'''
        for nlp_type in [LBFGSModel, LSR1Model]:
            nlp = nlp_type(SumOfSquares(2))
            nlp.push([1., 0.], [2., 0.])
            nlp.push([0., 1.], [0., 2.])
            x = np.zeros(2)
            self.assertRelError(nlp.hprod(x, [1., 1.]), np.array([2., 2.]))
            Hv = np.empty(2)
            out = nlp.hprod(x, [1., 1.], Hv=Hv)
            self.assertTrue(out is Hv)
            self.assertRelError(nlp.hess_op(x) * np.array([1., 1.]),
                                np.array([2., 2.]))
            self.assertEqual(nlp.counters.neval_hprod, 0)

    def test_hess_op_ignores_x(self):
        '''the operator does not depend on x'''
        nlp = LBFGSModel(Rosenbrock(2))
        nlp.push([1., 0.], [3., 1.])
        op1 = nlp.hess_op(np.zeros(2))
        op2 = nlp.hess_op(np.array([5., -5.]))
        v = np.array([1., 2.])
        self.assertRelError(op1.dot(v), op2.dot(v), atol=1e-15)
        self.assertTrue(op1 is nlp.op)

    def test_not_implemented(self):
        '''sparse Hessian primitives are not available'''
        nlp = LBFGSModel(HS6())
        x = np.zeros(2)
        v = np.ones(2)
        self.assertRaises(NotImplementedCapability, nlp.hess_structure)
        self.assertRaises(NotImplementedCapability, nlp.hess_coord, x)
        self.assertRaises(NotImplementedCapability, nlp.hess, x)
        self.assertRaises(NotImplementedCapability, nlp.hprod_coord,
                          [0], [0], [1.], v)
        self.assertRaises(NotImplementedCapability, nlp.hess_op_coord,
                          [0], [0], [1.])
        self.assertRaises(NotImplementedCapability, nlp.jth_hprod, x, v, 0)
        self.assertRaises(NotImplementedCapability, nlp.ghjvprod, x, v, v)

    def test_reset(self):
        '''reset discards corrections and keeps the counters'''
        model = SumOfSquares(2)
        nlp = LBFGSModel(model)
        nlp.obj(np.ones(2))
        nlp.push([1., 0.], [2., 0.])
        self.assertEqual(nlp.op.num_stored, 1)
        nlp.reset()
        self.assertEqual(nlp.op.num_stored, 0)
        self.assertEqual(model.counters.neval_obj, 1)
        self.assertRelError(nlp.hprod(np.ones(2), [1., 1.]),
                            np.array([1., 1.]))

    def test_dimensions(self):
        '''dimension errors in the quasi-Newton primitives'''
        nlp = LBFGSModel(SumOfSquares(3))
        self.assertRaises(DimensionError, nlp.push, [1., 0.], [1., 0., 0.])
        self.assertRaises(DimensionError, nlp.hprod, np.zeros(3), [1., 1.])
        self.assertRaises(DimensionError, nlp.hprod, np.zeros(3),
                          [1., 1., 1.], Hv=np.empty(2))
        self.assertRaises(DimensionError, nlp.grad, [1., 2.])
        self.assertRaises(DimensionError, nlp.hprod, np.ones(5),
                          [1., 1., 1.])
        self.assertRaises(DimensionError, nlp.hess_op, np.ones(2))
        nlp = LSR1Model(HS6())
        self.assertRaises(DimensionError, nlp.hprod, np.zeros(2), [1., 1.],
                          y=[1., 2.])
        self.assertRaises(DimensionError, nlp.hess_op, np.zeros(2),
                          y=[1., 2.])

    def test_show(self):
        '''model summary'''
        out = io.StringIO()
        LSR1Model(HS6()).show(out_file=out)
        self.assertTrue(
            out.getvalue().startswith('LSR1Model - A QuasiNewtonModel'))

if __name__ == "__main__":
    unittest.main()
