''' Common functions used by the Fermi estimate calculations '''
