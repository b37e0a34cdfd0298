class SitescanError(Exception):
    # base exception for all application-specific errors.
    pass

class ConfigError(SitescanError):
    # errors related to configuration.
    pass

class DiscoveryError(SitescanError):
    # errors during file discovery.
    pass

class RootNotFoundError(DiscoveryError):
    # the scan root does not exist.
    def __init__(self, root):
        self.root = root
        super().__init__(f"scan root does not exist: {root}")

class RootPermissionError(DiscoveryError):
    # the scan root exists but cannot be listed.
    def __init__(self, root, reason: str = "permission denied"):
        self.root = root
        super().__init__(f"cannot read scan root {root}: {reason}")

class WatchSetupError(SitescanError):
    # the os watch could not be established (watch limit, unsupported fs).
    pass

class CommandError(SitescanError):
    # errors resolving or running a cli command.
    pass

class OutputError(SitescanError):
    # errors during output operations.
    pass
