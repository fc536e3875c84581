"""Data processing module for dataset loading."""

from .load_dataset import MathQADataset, generate_sample_dataset, load_dataset

__all__ = ["MathQADataset", "generate_sample_dataset", "load_dataset"]
