''' Test FermiModel and VariableBindings '''
import pytest
import numpy as np

from fermicalc import FermiModel, VariableBindings
from fermicalc.common.uparser import FormulaSyntaxError
from fermicalc.common.distributions import Uniform, Gaussian, Lognormal, Poisson


def test_formula():
    model = FermiModel('revenue = population * meals_per_day * price')
    assert model.name == 'revenue'
    assert model.formula == 'population * meals_per_day * price'
    assert model.varnames == ['population', 'meals_per_day', 'price']
    assert all(model.var(name) == Uniform(0, 100) for name in model.varnames)

    model = FermiModel('2 * pi * r')
    assert model.name == 'f'
    assert model.varnames == ['r']


def test_change_formula():
    ''' Distributions are kept for variables still in the formula '''
    model = FermiModel('revenue = population * meals_per_day * price')
    model.assign('population', 'lognormal', low=5E5, high=2E6)
    model.set_formula('population * price * tax')
    assert model.name == 'revenue'
    assert model.varnames == ['population', 'price', 'tax']
    assert model.var('population') == Lognormal(5E5, 2E6)
    assert model.var('tax') == Uniform(0, 100)

    with pytest.raises(FormulaSyntaxError):
        model.set_formula('population * (price')
    assert model.formula == 'population * price * tax'   # Unchanged
    assert model.varnames == ['population', 'price', 'tax']

    with pytest.raises(FormulaSyntaxError):
        model.set_formula(42)
    assert model.formula == 'population * price * tax'

    with pytest.raises(FormulaSyntaxError):
        FermiModel(None)


def test_assign():
    model = FermiModel('f = a + b')
    model.assign('a', Gaussian(1, 2))
    assert model.var('a') == Gaussian(1, 2)
    model.assign('a', stddev=3)   # Update parameters of the existing distribution
    assert model.var('a') == Gaussian(1, 3)
    with pytest.raises(ValueError):
        model.assign('a', min=5)   # Not a gaussian parameter
    model.assign('b', min=5)
    assert model.var('b') == Uniform(5, 100)
    model.assign('b', {'type': 'poisson', 'lambda': 3})
    assert model.var('b') == Poisson(3)
    model.assign('b', 'gaussian', mean=3)
    assert model.var('b') == Gaussian(3, 10)

    with pytest.raises(KeyError):
        model.assign('c', 'uniform')

    with pytest.raises(ValueError):
        model.assign('a', 'cauchy')


def test_eval():
    model = FermiModel('f = x * 2')
    assert model.eval({'x': 2}) == 4


def test_montecarlo():
    ''' Restaurant revenue example '''
    model = FermiModel('revenue = population * meals_per_day * price')
    model.assign('population', 'lognormal', low=5E5, high=2E6)
    model.assign('meals_per_day', 'uniform', min=2, max=4)
    model.assign('price', 'gaussian', mean=12, stddev=3)
    result = model.monte_carlo(samples=5000, seed=1)
    assert result.count <= 5000
    assert result.p10 < result.median < result.p90
    assert 2E7 < result.median < 6E7

    result2 = model.monte_carlo(samples=5000, seed=1)
    assert np.array_equal(result.samples, result2.samples)


def test_bindings():
    bindings = VariableBindings('a', 'b', c=Gaussian(0, 1))
    assert bindings.names == ['a', 'b', 'c']
    assert bindings['a'] == Uniform(0, 100)
    assert len(bindings) == 3

    bindings['a'] = {'type': 'gaussian', 'mean': 1, 'stddev': 1}
    assert bindings['a'] == Gaussian(1, 1)
    with pytest.raises(TypeError):
        bindings['a'] = 5

    added, removed = bindings.refresh(['c', 'd', 'a'])
    assert added == ['d']
    assert removed == ['b']
    assert bindings.names == ['c', 'd', 'a']
    assert bindings['c'] == Gaussian(0, 1)

    config = bindings.get_config()
    assert config[0] == {'name': 'c', 'type': 'gaussian', 'mean': 0.0, 'stddev': 1.0}
    assert dict(VariableBindings.from_config(config)) == dict(bindings)
