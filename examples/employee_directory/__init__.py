"""
Employee directory sample built on the taskhub data-access layer.
"""

from .demo import bootstrap_context, hire, list_directory, run_demo, seed_sample_data

__all__ = ["bootstrap_context", "hire", "list_directory", "run_demo", "seed_sample_data"]
