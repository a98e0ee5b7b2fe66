"""Background workers for the subscription vault"""
from .billing_sweep import BillingSweepWorker

__all__ = ["BillingSweepWorker"]
