"""
This package contains the domain models of the Media Re-encoder.

Modules:
    exceptions.py: Exception hierarchy separating batch-fatal, per-file and
                   diagnostic-only failures.
    models.py: `MediaCategory`, `EncodeTask`, `EncodeOutcome` and
               `BatchSummary`.
    temp_models.py: `DecodedImage`, the scoped temporary file used while
                    scoring image encodes.
"""
