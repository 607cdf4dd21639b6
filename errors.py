class HuffvaultError(Exception):
    """Base class for every failure the compressor reports to its caller."""

    user_message = "compression failed"
    status = 500

    def __init__(self, detail: str = ""):
        super().__init__(detail or self.user_message)
        self.detail = detail


class EmptyInputError(HuffvaultError):
    user_message = "nothing to compress"
    status = 400


class UnknownSymbolError(HuffvaultError):
    user_message = "symbol not in code table"
    status = 500

    def __init__(self, symbol: int):
        super().__init__(f"symbol {symbol!r} has no code")
        self.symbol = symbol


class UnsupportedInputError(HuffvaultError):
    user_message = "input cannot be encoded in this symbol mode"
    status = 400


class MalformedContainerError(HuffvaultError):
    user_message = "corrupt or invalid file"
    status = 400


class MalformedCiphertextError(HuffvaultError):
    user_message = "corrupt or invalid file"
    status = 400


class AuthenticationError(HuffvaultError):
    # GCM cannot tell a wrong password from tampering; users are told "password".
    user_message = "incorrect password"
    status = 403


class IncompleteDecodeError(HuffvaultError):
    user_message = "corrupt or invalid file"
    status = 400

    def __init__(self, leftover: str):
        super().__init__(f"{len(leftover)} trailing bits do not form a code")
        self.leftover = leftover
