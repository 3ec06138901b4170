'''
Fermicalc - Fermi estimation calculator

Type a formula over named unknowns, assign each unknown a probability
distribution, and get the distribution of plausible outcomes by Monte
Carlo sampling.
'''

from .version import __version__, __date__

from .common import uparser, distributions
from .common.uparser import parse, evaluate, extract_variables, FormulaError, FormulaSyntaxError, EvalError
from .estimate import FermiModel, VariableBindings, simulate, NoValidSamples, SimulationResult
from . import project

__all__ = ['__version__', '__date__', 'uparser', 'distributions', 'parse', 'evaluate', 'extract_variables',
           'FormulaError', 'FormulaSyntaxError', 'EvalError', 'FermiModel', 'VariableBindings', 'simulate',
           'NoValidSamples', 'SimulationResult', 'project']
