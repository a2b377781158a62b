"""takeplan: budgeted source/item take scheduling."""

__version__ = "0.1.0"
