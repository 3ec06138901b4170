''' Fermicalc Estimate Module - Distribution of plausible outcomes of

    y = f(x1, x2... xn)

given N uncertain inputs, each with a uniform, gaussian, lognormal, or
poisson distribution, by Monte Carlo sampling.

Example usage:
>>> model = FermiModel('f = a * b')
>>> model.assign('a', 'uniform', min=2, max=4)
>>> model.assign('b', 'lognormal', low=10, high=1000)
>>> model.monte_carlo()
'''

from .model import FermiModel
from .bindings import VariableBindings
from .simulate import simulate, NoValidSamples
from .results import SimulationResult, Histogram

__all__ = ['FermiModel', 'VariableBindings', 'simulate', 'NoValidSamples', 'SimulationResult', 'Histogram']
