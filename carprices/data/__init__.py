"""
Data package for loading and checking the car listings dataset.

This package exposes functions to read the training CSV into a typed DataFrame
or a lazy stream of `CarListing` records, and to check the data invariants the
training set is expected to satisfy.
"""
