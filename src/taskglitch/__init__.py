"""taskglitch: sales-task metrics and ranking engine with a console dashboard."""

__version__ = "0.1.0"
