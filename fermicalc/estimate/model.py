''' Fermi estimation model: a formula plus a distribution for each variable '''

import logging

from ..common import uparser, distributions
from .bindings import VariableBindings
from .simulate import simulate, NUM_SAMPLES


class FermiModel:
    ''' Fermi estimate model made from a string formula

        Args:
            formula (str): Formula, optionally with a name, such as
                "revenue = population * meals_per_day * price"

        Example:
        >>> model = FermiModel('revenue = population * meals_per_day * price')
        >>> model.assign('population', 'lognormal', low=5E5, high=2E6)
        >>> model.assign('meals_per_day', 'uniform', min=2, max=4)
        >>> model.assign('price', 'gaussian', mean=12, stddev=3)
        >>> result = model.monte_carlo()
    '''
    def __init__(self, formula='f = x'):
        self.name = 'f'
        self.formula = ''
        self.expr = None
        self.description = ''
        self.bindings = VariableBindings()
        self.set_formula(formula)

    def __repr__(self):
        return f'<FermiModel {self.name} = {self.formula}>'

    def set_formula(self, formula):
        ''' Change the formula. Variables new to the formula are assigned the
            default distribution, variables no longer used are dropped.
            The model is unchanged if the formula can't be parsed.

            Raises:
                FormulaSyntaxError: if the formula is malformed
        '''
        name = self.name
        if isinstance(formula, str) and '=' in formula:
            name, formula = formula.split('=', 1)
            name = name.strip()
        expr = uparser.parse(formula)

        self.name = name
        self.formula = formula.strip()
        self.expr = expr
        added, removed = self.bindings.refresh(uparser.extract_variables(expr))
        if added or removed:
            logging.info('Formula variables changed. Added: %s, removed: %s', added, removed)
        return self

    @property
    def varnames(self):
        ''' Get list of variable names in the formula '''
        return self.bindings.names

    def var(self, name):
        ''' Get the distribution assigned to a variable '''
        return self.bindings[name]

    def assign(self, name, dist=None, **params):
        ''' Assign a distribution to a variable

            Args:
                name (str): Name of the variable
                dist: Distribution instance, config dictionary, or name of
                    distribution type. If None, params update the current
                    distribution.
                **params: Parameters of the distribution when dist is a type name
                    or None. Parameters not given take the type's defaults.

            Returns:
                The same FermiModel (use for chaining)
        '''
        if name not in self.bindings:
            raise KeyError(f'Variable `{name}` is not in formula "{self.formula}"')

        if dist is None:
            config = distributions.get_config(self.bindings[name])
            config.update(params)
            dist = distributions.from_config(config)
        elif isinstance(dist, str):
            dist = distributions.get_distribution(dist, **params)
        self.bindings[name] = dist
        return self

    def eval(self, values=None):
        ''' Evaluate the formula at the provided values

            Args:
                values (dict): Dictionary of variablename: value
        '''
        return uparser.evaluate(self.expr, values)

    def monte_carlo(self, samples=NUM_SAMPLES, seed=None, rng=None):
        ''' Calculate Monte Carlo samples

            Args:
                samples (int): number of random trials
                seed (int): seed for a new random generator
                rng (np.random.Generator): generator to use instead of seed

            Returns:
                SimulationResult instance
        '''
        return simulate(self.expr, self.bindings, n=samples, rng=rng, seed=seed)
