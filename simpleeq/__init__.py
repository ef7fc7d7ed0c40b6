"""Stereo three-band equaliser: filters, parameters, sample queues and spectrum analyser paths."""

__version__ = "0.1.0"
__all__ = ["analyzer", "fifo", "filters", "palette", "parameters", "processor"]