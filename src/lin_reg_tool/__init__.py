"""
Linear Regression Tool.

Trains a linear regression model from a GRT regression data file or a CSV
file and saves the trained pipeline to disk.
"""

__version__ = "0.1.0"
