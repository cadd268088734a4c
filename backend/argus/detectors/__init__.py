"""The five pattern detectors and their fixed registration order."""
from .base import Detector
from .budget_anomaly import BudgetAnomalyDetector
from .compressed_deadline import CompressedDeadlineDetector
from .registry import REGISTRATION_ORDER, build_detectors, registration_index
from .single_bidder import SingleBidderDetector
from .spec_tailoring import SpecTailoringDetector
from .vendor_repetition import VendorRepetitionDetector

__all__ = [
    "BudgetAnomalyDetector",
    "CompressedDeadlineDetector",
    "Detector",
    "REGISTRATION_ORDER",
    "SingleBidderDetector",
    "SpecTailoringDetector",
    "VendorRepetitionDetector",
    "build_detectors",
    "registration_index",
]
