"""
Dart scoring simulator - X01 and Cricket rules with computer opponents.
"""
__version__ = "0.1.0"
