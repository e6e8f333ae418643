"""
This package contains the batch pipeline of the Media Re-encoder.

The pipeline discovers the files of one folder, drives each of them through
the classifier, encoder and quality validator, isolates per-file failures and
collects the outcomes in enumeration order.
"""
