from nlpmodels.examples.rosenbrock import Rosenbrock
from nlpmodels.examples.sum_of_squares import SumOfSquares
from nlpmodels.examples.hs6 import HS6
from nlpmodels.examples.least_squares import LinearLeastSquares
