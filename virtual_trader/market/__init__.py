"""Instrument prices, price simulation and risk labelling."""

from .prices import PriceTable, PriceSnapshot, DEFAULT_INSTRUMENTS
from .simulator import PriceSimulator
from .risk import RiskClassifier

__all__ = ['PriceTable', 'PriceSnapshot', 'DEFAULT_INSTRUMENTS', 'PriceSimulator', 'RiskClassifier']
