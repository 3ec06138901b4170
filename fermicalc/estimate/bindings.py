''' Manage the distributions assigned to the variables of a formula '''

from collections.abc import MutableMapping

from ..common import distributions


class VariableBindings(MutableMapping):
    ''' Ordered mapping of variable name to Distribution

        Args:
            names (list): Variable names. Each gets the default distribution.
            **dists: Initial name=Distribution assignments
    '''
    def __init__(self, *names, **dists):
        self._dists = {}
        for name in names:
            self._dists[name] = distributions.default_distribution()
        for name, dist in dists.items():
            self[name] = dist

    def __repr__(self):
        items = ', '.join(f'{name}: {dist.describe()}' for name, dist in self._dists.items())
        return f'<VariableBindings {items}>'

    def __getitem__(self, name):
        return self._dists[name]

    def __setitem__(self, name, dist):
        if isinstance(dist, dict):
            dist = distributions.from_config(dist)
        if not hasattr(dist, 'sample'):
            raise TypeError(f'Not a distribution: {dist!r}')
        self._dists[name] = dist

    def __delitem__(self, name):
        del self._dists[name]

    def __iter__(self):
        return iter(self._dists)

    def __len__(self):
        return len(self._dists)

    @property
    def names(self):
        ''' List of variable names '''
        return list(self._dists)

    def refresh(self, names):
        ''' Synchronize the bindings with a new list of variable names.
            Existing distributions are kept, new names get the default
            distribution, and names no longer used are dropped.

            Args:
                names (list): Variable names in formula order

            Returns:
                Tuple of (added, removed) name lists
        '''
        added = [name for name in names if name not in self._dists]
        removed = [name for name in self._dists if name not in names]
        self._dists = {name: self._dists.get(name, distributions.default_distribution()) for name in names}
        return added, removed

    def get_config(self):
        ''' Get list of config dictionaries, one per variable '''
        config = []
        for name, dist in self._dists.items():
            d = {'name': name}
            d.update(distributions.get_config(dist))
            config.append(d)
        return config

    @classmethod
    def from_config(cls, config):
        ''' Create bindings from list of config dictionaries '''
        bindings = cls()
        for item in config:
            item = dict(item)
            name = item.pop('name')
            bindings[name] = distributions.from_config(item)
        return bindings
