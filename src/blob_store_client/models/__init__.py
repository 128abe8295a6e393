from .file import FileState, FileCreate, FileSnapshot

__all__ = ["FileState", "FileCreate", "FileSnapshot"]
