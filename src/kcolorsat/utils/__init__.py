"""
Utility modules: exceptions, DIMACS handling and logging helpers.
"""
