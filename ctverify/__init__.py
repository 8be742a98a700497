"""ctverify - verify policy templates and constraints against sample objects."""

__version__ = "0.1.0"
