# docnotes/schemas/__init__.py
"""
Schema module initialization.
Exports all schema classes from submodules for convenient imports.
"""
from .entries import *
from .teams import *
from .users import *
