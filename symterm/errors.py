
class SymtermError(Exception):
    """ Base class for all symterm errors"""
    pass

class SymtermTypeError(SymtermError):
    """ Raised when a term is not of the variant an operation requires"""
    pass

class SymtermArityError(SymtermError):
    """ Raised when the number of arguments or children is incorrect"""

class SymtermReleaseError(SymtermTypeError):
    """ Raised when a Release (or a function body) does not produce a Hold"""

class SymtermIntrinsicNotFound(SymtermError):
    """ Raised when an intrinsic call names an unregistered symbol"""

class SymtermStackUnderflow(SymtermError):
    """ Raised when popping an empty operand stack"""

class SymtermSerializationError(SymtermError):
    """ Raised when a snapshot is malformed or a term cannot be serialized"""
