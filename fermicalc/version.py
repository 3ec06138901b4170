__version__ = '1.0.0'
__date__ = '19-Oct-2026'
