"""kubemeter: dependency resolution for metering reporting resources."""

__version__ = "0.3.0"
