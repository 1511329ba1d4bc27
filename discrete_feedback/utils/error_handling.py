class ConfigurationError(ValueError):
    def __init__(self, message="Invalid model configuration"):
        self.message = message
        super().__init__(self.message)


class NonconvergentIntegration(RuntimeError):
    def __init__(self, message="Integration did not reach the requested accuracy"):
        self.message = message
        super().__init__(self.message)


class RestoreFormatError(Exception):
    def __init__(self, message="Unable to restore from the restart file"):
        self.message = message
        super().__init__(self.message)


class ProgramError(Exception):
    def __init__(self, message="Internal consistency check failed"):
        self.message = message
        super().__init__(self.message)
