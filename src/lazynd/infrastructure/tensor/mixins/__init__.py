"""
Operator mixins shared by every expression kind.

Each subpackage exports a single mixin class. Operators never evaluate: they
hand their operands to the functional engine, which returns lazy nodes.
"""
