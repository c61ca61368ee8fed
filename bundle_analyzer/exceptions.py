"""Exception classes for bundle_analyzer."""


class AnalyzerError(Exception):
    """Base exception for all bundle_analyzer errors."""


class MalformedReportError(AnalyzerError):
    """Raised when a bundler report cannot be read.

    This covers input that is not valid JSON, data that does not match the
    report schema, and reports whose reasons point at modules that do not
    exist.

    Attributes:
        message: Human-readable error description
        raw_input: The data that failed validation (optional)
    """

    def __init__(self, message: str, raw_input: object = None):
        super().__init__(message)
        self.raw_input = raw_input


class CircularDependencyError(AnalyzerError):
    """Raised when module reasons form a cycle.

    Attributes:
        module_name: Name of the module that was requested while its own
            resolution was still in progress
    """

    def __init__(self, message: str, module_name: str | None = None):
        super().__init__(message)
        self.module_name = module_name
