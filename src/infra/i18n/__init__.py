from .labels import load_messages, lookup_message, make_label_resolver

__all__ = ["load_messages", "lookup_message", "make_label_resolver"]
