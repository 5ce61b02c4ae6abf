from nlpmodels.options import get_opt, get_positive_opt, print_dict
from nlpmodels.options import BadNLPOption
from nlpmodels.util import EPS, DimensionError, NotImplementedCapability
from nlpmodels.util import lencheck
from nlpmodels.meta import NLPModelMeta, NLSMeta
from nlpmodels.counters import Counters, NLSCounters
from nlpmodels.model import AbstractNLPModel
from nlpmodels.nls import AbstractNLSModel
from nlpmodels.linalg import QuasiNewtonApprox
from nlpmodels.linalg import LimitedMemoryBFGS, LimitedMemorySR1
from nlpmodels.qnmodel import QuasiNewtonModel, LBFGSModel, LSR1Model
from nlpmodels.dercheck import DerivativeChecker, Inconsistency
from nlpmodels.dercheck import gradient_check, jacobian_check, hessian_check
from nlpmodels import examples
