from .main import main, txbridge

__all__ = ["main", "txbridge"]
