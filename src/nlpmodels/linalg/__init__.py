from nlpmodels.linalg.basic import QuasiNewtonApprox
from nlpmodels.linalg.lbfgs import LimitedMemoryBFGS
from nlpmodels.linalg.lsr1 import LimitedMemorySR1
