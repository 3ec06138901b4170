''' Class for managing a project, a list of calculator objects. '''

from contextlib import suppress
from io import StringIO
import shutil

from .component import read_yaml
from .proj_estimate import ProjectEstimate
from ..common import report


class Project:
    ''' Fermi estimate Project container. Holds a list of calculation objects. '''
    def __init__(self, items=None):
        self.items = []
        if items is not None:
            for item in items:
                self.add_item(item)

    def count(self):
        ''' Get number of items in project '''
        return len(self.items)

    def get_mode(self, index):
        ''' Get calculation mode for the index '''
        item = self.items[index]
        if isinstance(item, ProjectEstimate):
            return 'estimate'
        raise ValueError(f'Unknown item {item}')

    def add_item(self, item):
        ''' Add calculator item to project.

            Args:
                item: ProjectComponent item to add.
        '''
        item.project = self
        self.items.append(item)

    def rem_item(self, item):
        ''' Remove item from project

            Args:
                item (int or string): If int, will remove item at index[int]. If string, will remove
                first item with that name.
        '''
        try:
            removed = self.items.pop(item)
        except TypeError:
            names = self.get_names()
            removed = self.items.pop(names.index(item))

        with suppress(AttributeError):
            removed.project = None

    def rename_item(self, index, name):
        ''' Rename an item '''
        self.items[index].name = name

    def get_names(self):
        ''' Get names of all project components '''
        return [item.name for item in self.items]

    def save_config(self, fname):
        ''' Save project config file '''
        fstr = StringIO()
        for item in self.items:
            item.save_config(fstr)
        fstr.seek(0)
        try:
            shutil.copyfileobj(fstr, fname)  # fname is file object
        except AttributeError:  # fname is string name of file
            fstr.seek(0)
            with open(fname, 'w', encoding='utf-8') as f:
                shutil.copyfileobj(fstr, f)

    @classmethod
    def from_configfile(cls, fname):
        ''' Load project from config file.

        Args:
            fname: File name or file object to read from

        Returns:
            Project instance loaded from config, or None if the file isn't valid YAML
        '''
        config = read_yaml(fname)
        if config is None:
            return None

        if not isinstance(config, list):
            config = [config]

        newproj = cls()
        for configdict in config:
            if not hasattr(configdict, 'get'):  # Something not right with file
                return None

            mode = configdict.get('mode', 'estimate')
            if mode == 'estimate':
                item = ProjectEstimate.from_config(configdict)
            else:
                raise ValueError(f'Unsupported project mode {mode}')
            newproj.add_item(item)
        return newproj

    def calculate(self):
        ''' Run calculate() method on all items '''
        for item in self.items:
            item.calculate()

    def report_short(self):
        ''' Summary report for every project component '''
        r = report.Report()
        for item in self.items:
            r.hdr(item.name, level=1)
            r.txt(f'{item.model.name} = {item.model.formula}\n\n')
            r.append(item.result.report.summary())
            r.div()
        return r

    def report_all(self):
        ''' Full report, including histograms, for every project component '''
        r = report.Report()
        for item in self.items:
            r.hdr(item.name, level=1)
            r.txt(f'{item.model.name} = {item.model.formula}\n\n')
            for name, dist in item.model.bindings.items():
                r.txt(f'- {name}: {dist.describe()}\n')
            r.newline()
            r.append(item.result.report.all())
            r.div()
        return r
