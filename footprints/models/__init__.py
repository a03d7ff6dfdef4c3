"""Models package - imports all models for the application"""
from ..extensions import db
from .building import Building
from .dataset_load import DatasetLoad

__all__ = ["db", "Building", "DatasetLoad"]
