"""Domain error taxonomy for claim-signature issuance."""


class ProofError(Exception):
    """Base class for errors raised while issuing a proof."""

    status_code: int = 500
    public_message: str = "error generating discount message"

    def __init__(self, message: str = "", *, public_message: str | None = None):
        super().__init__(message or self.public_message)
        if public_message is not None:
            self.public_message = public_message


class InputError(ProofError):
    """The caller supplied a missing or malformed address."""

    status_code = 400
    public_message = "valid address is required"


class ConfigurationError(ProofError):
    """The service is misconfigured (signer key, schema ids, signer address)."""

    status_code = 500
    public_message = "currently unable to sign"


class ConflictError(ProofError):
    """A different address in the same identity group already holds the claim."""

    status_code = 409
    public_message = "discount already claimed by a linked address"


class UpstreamError(ProofError):
    """An external collaborator failed or returned data we cannot parse."""

    status_code = 500
    public_message = "error generating discount message"
