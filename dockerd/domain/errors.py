class DockerdError(Exception):
    """Base for every per-call failure. The message is what the caller sees."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class NoSuchCommand(DockerdError):
    def __init__(self, name: str):
        super().__init__(f"No such command: {name}")
        self.name = name


class InvalidArguments(DockerdError):
    pass


class UnresolvedReference(DockerdError):
    def __init__(self, reference: str):
        super().__init__(f"No such layer or container: {reference}")
        self.reference = reference


class NoLayersSpecified(DockerdError):
    def __init__(self):
        super().__init__("Please specify at least one layer")


class NoSuchContainer(DockerdError):
    def __init__(self, container_id: str):
        super().__init__(f"No such container: {container_id}")
        self.container_id = container_id


class AlreadyRunning(DockerdError):
    def __init__(self, container_id: str):
        super().__init__(f"Already running: {container_id}")
        self.container_id = container_id


class ProcessSpawnFailure(DockerdError):
    pass


class ProcessExitError(DockerdError):
    def __init__(self, returncode: int):
        if returncode < 0:
            message = f"signal: {-returncode}"
        else:
            message = f"exit status {returncode}"
        super().__init__(message)
        self.returncode = returncode


class StreamCopyError(DockerdError):
    pass
