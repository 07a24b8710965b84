from .json_loader import JsonContentLoader, load_bindings

__all__ = ["JsonContentLoader", "load_bindings"]
