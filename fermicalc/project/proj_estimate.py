''' Fermi estimate project component '''

import numpy as np

from .component import ProjectComponent
from ..common import distributions
from ..estimate.model import FermiModel
from ..estimate.simulate import NUM_SAMPLES


class ProjectEstimate(ProjectComponent):
    ''' Fermi estimate project component '''
    def __init__(self, model=None, name='estimate'):
        super().__init__(name=name)
        if model is not None:
            self.model = model
        else:
            self.model = FermiModel('f = x')
        self.nsamples = NUM_SAMPLES
        self.seed = None

    def calculate(self):
        ''' Run the Monte Carlo simulation '''
        self._result = self.model.monte_carlo(samples=self.nsamples, seed=self.seed)
        return self._result

    def save_samples_csv(self, fname):
        ''' Save sorted Monte Carlo samples to CSV file '''
        np.savetxt(fname, self.result.samples, delimiter=', ', fmt='%.8e', header=self.model.name)

    def get_config(self):
        ''' Get configuration dictionary describing this calculation '''
        d = {}
        d['mode'] = 'estimate'
        d['name'] = self.name
        d['function'] = self.model.name
        d['formula'] = self.model.formula
        d['samples'] = self.nsamples
        if self.seed is not None:
            d['seed'] = self.seed
        if self.description:
            d['description'] = self.description
        d['inputs'] = self.model.bindings.get_config()
        return d

    def load_config(self, config):
        ''' Load config into this project instance '''
        if 'formula' not in config:
            raise ValueError('Estimate config requires a formula')

        self.model = FermiModel(f'{config.get("function", "f")} = {config["formula"]}')
        self.name = config.get('name', 'estimate')
        self.nsamples = int(config.get('samples', NUM_SAMPLES))
        self.seed = config.get('seed')
        self.description = config.get('description', '')
        self._result = None

        for item in config.get('inputs', []):
            item = dict(item)
            name = item.pop('name', None)
            if name not in self.model.bindings:
                raise ValueError(f'Input `{name}` is not a variable in formula "{self.model.formula}"')
            self.model.assign(name, distributions.from_config(item))
