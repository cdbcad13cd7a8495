"""
carprices package initializer.

This package contains the project source code for data loading, feature
preprocessing, model training, persistence and prediction serving for the
car price prediction workshop.

Modules
-------
- config: Central configuration, path constants and logging setup.
- schema: Input/output record types and the training data schema.
- data: CSV loading and data quality checks.
- features: Feature pipeline construction.
- models: Model training, evaluation, persistence and prediction utilities.
- web: Flask front end serving predictions.
"""

__version__ = "0.1.0"
