"""
Concrete implementations: expression kinds, iterators, the functional
engine and the array routines built on it.
"""
