"""
Model utilities package.

This package contains the helper modules for training models, persisting them
and making predictions. Typical entrypoints are:

- carprices.models.train.main()            : command line training job
- carprices.models.train.train_model()     : fit, evaluate and cross-validate a pipeline
- carprices.models.persistence.load_model(): load a saved pipeline artifact
- carprices.models.predict.PredictionService.predict(): price a single listing
"""
