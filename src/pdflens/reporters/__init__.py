from .rich_reporter import RichReporter

__all__ = ["RichReporter"]
